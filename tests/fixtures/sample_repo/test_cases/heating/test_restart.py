"""
Polarion ID: PRJ-102
Setup: bench B extended
Initial estimate: 45
"""
from lib.controller import restart_device


class TestRestart:
    def test_002_restart(self):
        restart_device(self.device)
