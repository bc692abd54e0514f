"""Spots app package.

This app encapsulates everything related to listings: the spot model and
its images, the validated search filter with pagination and rating
aggregation, and the transactional image replacement.
"""
