"""
Polarion ID: PRJ-101
Setup: Bench A
Initial estimate: 1:30
"""
from lib.heater import power_cycle


class TestPowerCycle:
    def test_001_power_cycle(self):
        power_cycle(self.heater)
