"""Hydraulic inputs and the total head calculation."""

from dataclasses import dataclass

# Feet of water column per PSI
PSI_TO_FEET = 2.31


def total_head(pressure: float, static_water_level: float, pump_setting_depth: float) -> float:
    """Total head in feet.

    ``pressure * 2.31 + static_water_level + pump_setting_depth``. The
    pressure term is counted once. Inputs are not range-checked.
    """
    return pressure * PSI_TO_FEET + static_water_level + pump_setting_depth


@dataclass(frozen=True)
class HydraulicInputs:
    """Hydraulic inputs of one selection request.

    Attributes:
        pressure: required pressure [PSI]
        static_water_level: depth to static water [ft]
        pump_setting_depth: pump setting below static level [ft]
        target_gpm: required flow [GPM]
    """
    pressure: float
    static_water_level: float
    pump_setting_depth: float
    target_gpm: float

    @property
    def total_head(self) -> float:
        return total_head(self.pressure, self.static_water_level, self.pump_setting_depth)
