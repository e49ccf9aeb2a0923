"""Desktop simulator hosting the wheel in a pygame window."""
