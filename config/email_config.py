"""
Email service configuration constants.

These are fixed values that don't change per environment.
Environment-specific values (API keys, hosts) are loaded from settings.
"""

# Resend API endpoint
RESEND_API_URL = "https://api.resend.com/emails"

# Default values (can be overridden by env vars)
EMAIL_DEFAULTS = {
    "mode": "console",
    "from_email": "noreply@kushfinds.com",
    "from_name": "Kushfinds",
    "smtp_port": 465,
}

# Transactional templates
VERIFICATION_SUBJECT = "Confirmation of registration"
VERIFICATION_BODY = "Your registration confirmation code: {code}"
