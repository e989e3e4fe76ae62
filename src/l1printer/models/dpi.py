"""Common printer resolutions and DPI scaling helpers."""

from pydantic import BaseModel

# Resolution template geometry is authored in
STANDARD_DPI = 96


class DPIPreset(BaseModel):
    """A named printer resolution."""

    name: str
    dpi: int
    description: str
    typical_printers: list[str]


DPI_PRESETS: dict[str, DPIPreset] = {
    "STANDARD": DPIPreset(
        name="Standard",
        dpi=203,
        description="Standard thermal printer resolution",
        typical_printers=["Zebra GK420d", "Zebra ZD410", "DYMO LabelWriter 450"],
    ),
    "HIGH": DPIPreset(
        name="High Resolution",
        dpi=300,
        description="High resolution thermal printer",
        typical_printers=["Zebra GK420t", "Zebra ZD420", "Brother QL-800"],
    ),
    "VERY_HIGH": DPIPreset(
        name="Very High Resolution",
        dpi=600,
        description="Very high resolution printer",
        typical_printers=["Zebra ZT410", "Zebra ZT610", "TSC TTP-247"],
    ),
    "SCREEN": DPIPreset(
        name="Screen DPI",
        dpi=96,
        description="Standard screen resolution (for testing)",
        typical_printers=["Computer Monitor", "Debug Preview"],
    ),
}


def get_dpi_preset(dpi: int) -> DPIPreset | None:
    """Find the preset with exactly this resolution."""
    for preset in DPI_PRESETS.values():
        if preset.dpi == dpi:
            return preset
    return None


def calculate_scale_factor(from_dpi: float, to_dpi: float) -> float:
    """Ratio converting lengths authored at ``from_dpi`` to ``to_dpi``."""
    return to_dpi / from_dpi


def recommended_font_size(base_font_size: float, target_dpi: float) -> int:
    """Scale a screen-resolution font size to the target printer resolution."""
    return round(base_font_size * calculate_scale_factor(STANDARD_DPI, target_dpi))
