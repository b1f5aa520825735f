"""
Common Error Constants

User-facing messages shared by routers and services.
"""

# Session errors
ERROR_LOGIN_REQUIRED = "Please log in to continue."
ERROR_SESSION_EXPIRED = "Session expired, please log in again."
ERROR_PASSWORDS_MISMATCH = "Passwords do not match."
ERROR_AUTH_UNKNOWN = "An unknown error occurred"

# Cart errors
ERROR_CART_EMPTY = "Your cart is empty. Please add items before proceeding."

# Catalog errors
ERROR_PRODUCTS_UNAVAILABLE = "Failed to load products. Please try again later."
ERROR_PRODUCT_NOT_FOUND = "Product not found"

# Checkout errors
ERROR_CHECKOUT_SAVE_FAILED = "Failed to save checkout data."

# Checkout form validation
ERROR_NAME_TOO_SHORT = "Name must be at least 2 characters"
ERROR_INVALID_PHONE = "Invalid phone number"
ERROR_ADDRESS_TOO_SHORT = "Address must be at least 5 characters"

# Success messages
MESSAGE_CHECKOUT_SUCCESS = "Payment successful! Redirecting..."
MESSAGE_SIGNUP_SUCCESS = "Signup successful! You can now log in."

# Generic errors
ERROR_INTERNAL = "Internal server error"
