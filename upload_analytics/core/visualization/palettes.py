# core/visualization/palettes.py

from typing import Dict, List

from upload_analytics.core.exceptions import ConfigurationError

COLOR_SCHEMES: Dict[str, List[str]] = {
    "blue": ["#3B82F6", "#1E40AF", "#60A5FA", "#93C5FD", "#DBEAFE", "#1D4ED8", "#2563EB"],
    "gradient": ["#667eea", "#764ba2", "#f093fb", "#f5576c", "#4facfe", "#00f2fe", "#43e97b"],
    "vibrant": ["#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7", "#DDA0DD", "#98D8C8"],
    "monochrome": ["#374151", "#6B7280", "#9CA3AF", "#D1D5DB", "#F3F4F6", "#111827", "#4B5563"],
}


def get_palette(name: str) -> List[str]:
    """
    Ordered colors of a named palette; unknown names are a configuration error
    """
    try:
        return list(COLOR_SCHEMES[name])
    except KeyError:
        raise ConfigurationError(
            f"Unknown color scheme '{name}'",
            {"available": sorted(COLOR_SCHEMES)}
        ) from None


def with_alpha(color: str, alpha_hex: str) -> str:
    """Append a two-digit hex alpha to a #RRGGBB color"""
    return f"{color}{alpha_hex}"

