"""User-facing strings, kept in one place so clients and tests agree on them."""

SUCCESS = 'Excellent Memory!'
WRONG_ORDER = 'Wrong order!'
PLACEMENT_FAILED = 'Something went wrong, please start a new game.'
TOKEN_COUNT_RANGE = 'Please enter a number between {minimum} and {maximum}.'
FIELD_TOO_SMALL = 'The play area is too small for that many tokens.'
