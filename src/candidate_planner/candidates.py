"""Tracked objects: identity, optional orbit, and the visibility fields an update fills in."""

from __future__ import annotations

from dataclasses import dataclass

from candidate_planner.constants import DEFAULT_SLOPE_G
from candidate_planner.coords import SkyPosition, Visibility
from candidate_planner.designations import catalog_id, pack_designation, pack_number
from candidate_planner.orbits import OrbitalElements
from candidate_planner.time_utils import Moment

STATUS_PENDING = 'pending'
STATUS_OK = 'ok'
STATUS_NO_POSITION = 'no-position'
STATUS_FAILED = 'failed'


@dataclass
class TrackedObject:
    """One asteroid, comet or unconfirmed candidate on the observing list.

    Objects with elements are propagated each update; candidates and comets
    may instead carry a directly observed ``position``, which is used as is.
    Fields after ``position`` are outputs written by
    ``candidate_planner.visibility.update_object``; they are None until the
    first successful update and are cleared when nothing can be computed.
    """

    name: str
    number: str = ''
    provisional_designation: str = ''
    is_candidate: bool = False
    is_comet: bool = False
    elements: OrbitalElements | None = None
    h: float | None = None
    g: float = DEFAULT_SLOPE_G
    position: SkyPosition | None = None
    packed_number: str = ''
    packed_designation: str = ''

    magnitude: float | None = None
    motion: float | None = None  # arcmin/hour
    best_altitude: float | None = None  # degrees
    meridian: Moment | None = None
    rise_time: Moment | None = None
    set_time: Moment | None = None
    half_width_hours: float | None = None
    visibility: Visibility | None = None
    moon_separation: float | None = None  # degrees
    helio_distance: float | None = None
    geo_distance: float | None = None
    phase_angle_deg: float | None = None
    galactic_latitude: float | None = None
    diameter_m: float | None = None
    status: str = STATUS_PENDING
    error: str | None = None

    def __post_init__(self) -> None:
        if not self.packed_number and self.number:
            self.packed_number = pack_number(self.number)
        if not self.packed_designation and self.provisional_designation:
            self.packed_designation = pack_designation(self.provisional_designation)

    @property
    def identity(self) -> str:
        """Number in brackets when numbered, otherwise the name."""
        if self.number:
            return f'({self.number.strip("()")})'
        return self.name

    @property
    def catalog_id(self) -> str:
        return catalog_id(self.packed_number, self.packed_designation)

    @property
    def has_orbit(self) -> bool:
        return self.elements is not None and not self.is_candidate

    def clear_visibility(self) -> None:
        """Reset every computed field to None."""
        self.magnitude = None
        self.motion = None
        self.best_altitude = None
        self.meridian = None
        self.rise_time = None
        self.set_time = None
        self.half_width_hours = None
        self.visibility = None
        self.moon_separation = None
        self.helio_distance = None
        self.geo_distance = None
        self.phase_angle_deg = None
        self.galactic_latitude = None
        self.diameter_m = None
