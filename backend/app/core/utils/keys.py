import re
import unicodedata


def generate_slug(name: str, max_length: int = 20) -> str:
    """Generate a slug from a given name, e.g. "Blood Donation" -> "blood-donation"."""
    # Normalize the name (remove accents, convert to lowercase)
    name = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("utf-8")
    name = re.sub(r"[^a-zA-Z0-9\s-]", "", name).strip().lower()  # Remove special chars
    name = re.sub(
        r"[\s-]+", "-", name
    )  # Replace spaces and multiple dashes with a single dash
    return name[:max_length].strip("-")
