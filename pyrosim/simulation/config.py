"""Config — load simulation parameters from YAML files.

World size, boundary mode, heat-transfer coefficients, landscape
generation and the default strength of user edits all live in YAML and
are parsed into a typed dataclass here.  Keys missing from the file
fall back to the dataclass defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path

import yaml

from pyrosim.world.topology import Topology
from pyrosim.world.world import HORIZONTAL_HEAT_TRANSFER, VERTICAL_HEAT_TRANSFER


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for deterministic landscapes.
        scale: Edge length of one cell (m).
        world_width: Number of grid columns.
        world_height: Number of grid rows.
        topology: Boundary mode, ``"bounded"`` or ``"toroidal"``.
        ambient_temperature: Air temperature and initial cell
            temperature (K).
        max_step: Longest time step (s) a single update may take;
            longer requests are capped.
        vertical_heat_transfer: Cell-to-air coupling (W/Km^2).
        horizontal_heat_transfer: Cell-to-cell coupling (W/K).
        num_groves: Tree groves placed by the landscape generator.
        grove_radius: Radius of each grove in cells.
        grass_level: Mean grass channel intensity (0-255).
        ignite_radius: Default ignition radius (m).
        ignite_temperature: Default ignition temperature rise (K).
        splash_radius: Default splash radius (m).
        splash_amount: Default water poured per splash (kg).
        dirty_matter_threshold: Mass change (kg) at which a cell is
            reported as dirty.
        dirty_energy_threshold: Energy change (J) at which a cell is
            reported as dirty.
    """

    seed: int = 42
    scale: float = 1.0
    world_width: int = 64
    world_height: int = 64
    topology: str = Topology.TOROIDAL.value
    ambient_temperature: float = 293.15
    max_step: float = 0.5

    # Heat transfer
    vertical_heat_transfer: float = VERTICAL_HEAT_TRANSFER
    horizontal_heat_transfer: float = HORIZONTAL_HEAT_TRANSFER

    # Landscape generation
    num_groves: int = 12
    grove_radius: int = 6
    grass_level: float = 160.0

    # Editing defaults
    ignite_radius: float = 10.0
    ignite_temperature: float = 1000.0
    splash_radius: float = 10.0
    splash_amount: float = 1.0

    # Dirty tracking
    dirty_matter_threshold: float = 0.5
    dirty_energy_threshold: float = 1.0e3

    def __post_init__(self) -> None:
        """Normalise and validate the topology name."""
        self.topology = Topology.from_name(self.topology).value

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ValueError: If the file names an unknown topology.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})
