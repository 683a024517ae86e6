from datetime import datetime, timezone

import pytest

from skytracker.models.element_set import OrbitalElementSet
from skytracker.physics.timebase import instant_from_datetime

ISS_2019 = (
    "ISS (ZARYA)",
    "1 25544U 98067A   19343.69339541  .00001764  00000-0  38792-4 0  9991",
    "2 25544  51.6439 211.2001 0007417  17.6667  85.6398 15.50103472202482",
)

ISS_2021 = (
    "ISS (ZARYA)",
    "1 25544U 98067A   21275.51020370  .00003026  00000-0  63146-4 0  9990",
    "2 25544  51.6454 297.5612 0003681  73.8901  43.4185 15.48957534303377",
)

STARLINK_1007 = (
    "STARLINK-1007",
    "1 44713U 19074A   21275.50886752  .00001156  00000-0  93328-4 0  9990",
    "2 44713  53.0534 123.4578 0001387  87.6543 272.4623 15.06380957106897",
)

STARLINK_1008 = (
    "STARLINK-1008",
    "1 44714U 19074B   21275.51286123  .00001428  00000-0  11241-3 0  9993",
    "2 44714  53.0541 123.4210 0001462  84.1156 276.0010 15.06391854106893",
)

# line 2 checksum digit changed from 7 to 3
STARLINK_1007_BAD_CHECKSUM = (
    STARLINK_1007[0],
    STARLINK_1007[1],
    STARLINK_1007[2][:-1] + "3",
)

# mean motion "15.06380957" with the digit 0 replaced by the letter O;
# both count as zero, so the checksum still matches
STARLINK_1007_BAD_FIELD = (
    STARLINK_1007[0],
    STARLINK_1007[1],
    STARLINK_1007[2].replace("15.06380957", "15.O6380957"),
)

# near the 2021 element-set epochs
T_2021 = instant_from_datetime(datetime(2021, 10, 2, 13, 0, 0, tzinfo=timezone.utc))


def as_text(*groups):
    return "\n".join(line for group in groups for line in group) + "\n"


@pytest.fixture
def iss_2019():
    return OrbitalElementSet(*ISS_2019)


@pytest.fixture
def starlink_1007():
    return OrbitalElementSet(*STARLINK_1007)


@pytest.fixture
def constellation_text():
    return as_text(STARLINK_1007, ISS_2021, STARLINK_1008)


@pytest.fixture
def mixed_text():
    return as_text(STARLINK_1007, STARLINK_1007_BAD_CHECKSUM, ISS_2021, STARLINK_1008)


class FakeSatrec:
    """Stands in for sgp4.api.Satrec to force a propagation outcome."""

    def __init__(self, code=0, r=(7000.0, 0.0, 0.0), v=(0.0, 7.5, 0.0)):
        self.code = code
        self.r = r
        self.v = v
        self.calls = 0

    def sgp4(self, jd, fr):
        self.calls += 1
        return self.code, self.r, self.v
