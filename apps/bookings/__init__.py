"""Bookings app package.

Date-range reservations of spots, the availability check that guards their
creation, and the listings of a spot's and a user's bookings.
"""
