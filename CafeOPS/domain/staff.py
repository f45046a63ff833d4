"""Staff roles and on-duty headcount."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict

from CafeOPS.domain.scenario import Wages


class Role(str, Enum):
    BARISTA = "BARISTA"
    LEAD = "LEAD"


@dataclass(frozen=True)
class Staffing:
    """Headcount on duty for one tick."""

    baristas: int = 0
    leads: int = 0

    @property
    def headcount(self) -> Dict[Role, int]:
        return {Role.BARISTA: self.baristas, Role.LEAD: self.leads}

    def hourly_cost(self, wages: Wages) -> float:
        """Hourly cost of the staff on duty."""
        rates = {Role.BARISTA: wages.barista, Role.LEAD: wages.lead}
        return sum(count * rates[role] for role, count in self.headcount.items())


CLOSED = Staffing(baristas=0, leads=0)
EDGE_SHIFT = Staffing(baristas=1, leads=1)
FULL_SHIFT = Staffing(baristas=2, leads=1)
