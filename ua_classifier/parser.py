from __future__ import annotations

import os

from . import loader
from .loader import RuleTable
from .models import CPU, OS, Device, Engine, Product, UserAgent


class Parser:
    """Classifies user agent strings against a compiled ``RuleTable``.

    Parsing never fails: a category without a matching rule simply has all
    its fields set to ``None``.
    """

    def __init__(self, table: RuleTable) -> None:
        self.table = table

    @classmethod
    def from_path(cls, path: str | os.PathLike[str] | None = None) -> Parser:
        return cls(loader.load(path))

    def parse_product(self, s: str) -> Product:
        return self.table.product.extract(s) or Product()

    def parse_os(self, s: str) -> OS:
        return self.table.os.extract(s) or OS()

    def parse_device(self, s: str) -> Device:
        return self.table.device.extract(s) or Device()

    def parse_cpu(self, s: str) -> CPU:
        return self.table.cpu.extract(s) or CPU()

    def parse_engine(self, s: str) -> Engine:
        return self.table.engine.extract(s) or Engine()

    def parse(self, agent: str, ip: str) -> UserAgent:
        user_agent = UserAgent(
            ip=ip,
            product=self.parse_product(agent),
            os=self.parse_os(agent),
            device=self.parse_device(agent),
            cpu=self.parse_cpu(agent),
            engine=self.parse_engine(agent),
            user_agent=agent or None,
        )
        user_agent.fingerprint = user_agent.make_fingerprint()
        user_agent.hash = user_agent.make_hash()
        return user_agent
