"""Reviews app package: star ratings with text and images left on spots."""
