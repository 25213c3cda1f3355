HTTP_STATUS_CODES = {
    "OK": 200,
    "CREATED": 201,
    "NO_CONTENT": 204,
    "BAD_REQUEST": 400,
    "UNAUTHORIZED": 401,
    "FORBIDDEN": 403,
    "NOT_FOUND": 404,
    "CONFLICT": 409,
    "TOO_MANY_REQUESTS": 429,
    "INTERNAL_SERVER_ERROR": 500,
    "SERVICE_UNAVAILABLE": 503,
}

ERROR_MESSAGES = {
    "VALIDATION_FAILED": "Validation failed. Please check your inputs.",
    "SERVER_ERROR": "An unexpected error occurred. Please try again later.",
}

AUTHENTICATION_MESSAGES = {
    "WRONG_CREDENTIALS": "wrong username or password",
    "BAD_TOKEN": "bad token",
    "FORBIDDEN": "forbidden",
}

ROLES = {
    "ADMIN": "admin",
    "USER": "user",
    "GUEST": "guest",
}

# roles that can be stored on an account; guest is only ever a request identity
ACCOUNT_ROLES = [ROLES["ADMIN"], ROLES["USER"]]

REQUEST_STATUSES = ["pending", "solved", "rejected", "workout"]

# accepted image formats for every upload route
ALLOWED_EXTENSIONS = {"jpg", "jpeg"}
ALLOWED_MIMETYPE_PATTERN = r"jpeg|jpg"

# upload form field name per image slot
UPLOAD_FIELDS = {
    "PRODUCT_IMAGE": "product_image",
    "PRODUCT_GALLERY_IMAGE": "product_gallery_image",
    "ANNOUNCEMENT_IMAGE": "announcement_image",
}

GALLERY_FILE_PREFIX = "gallery-image-"
