import re

from utils.exceptions import ValidationError

HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


def validate_email(email: str) -> str:
    """Validate email format."""
    if not email or "@" not in email or "." not in email.split("@")[-1]:
        raise ValidationError(f"Invalid email: {email}")
    return email.strip().lower()


def validate_password_strength(password: str) -> str:
    """Passwords need 8+ characters with at least one letter and one digit."""
    if not password or len(password) < 8:
        raise ValidationError("Password must be at least 8 characters")
    if not re.search(r"[A-Za-z]", password) or not re.search(r"\d", password):
        raise ValidationError("Password must contain letters and digits")
    return password


def validate_full_name(name: str) -> str:
    """Validate a display name."""
    if not name or len(name.strip()) < 2:
        raise ValidationError("Name must be at least 2 characters")
    return name.strip()


def validate_hex_color(color: str) -> str:
    """Validate a branding color like #FF5500."""
    if not HEX_COLOR_PATTERN.match(color or ""):
        raise ValidationError(f"Invalid color: {color}")
    return color.upper()


def validate_coordinates(lat: float, lng: float) -> tuple[float, float]:
    """Validate a lat/lng pair."""
    if not -90 <= lat <= 90 or not -180 <= lng <= 180:
        raise ValidationError(f"Invalid coordinates: {lat}, {lng}")
    return lat, lng
