"""Cross-cutting API plumbing shared by the domain apps."""
