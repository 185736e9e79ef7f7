"""
Network Design Planner - Equipment Model
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Network devices that configurations are generated for and deployed to.
"""

from sqlalchemy import Column, DateTime, Integer, String

from .base import Base, utcnow


class EquipmentCategory:
    """Equipment category constants."""

    SWITCH = "switch"
    ROUTER = "router"
    FIREWALL = "firewall"
    AP = "ap"
    SERVER = "server"

    ALL = (SWITCH, ROUTER, FIREWALL, AP, SERVER)


class Equipment(Base):
    """A catalogued network device."""

    __tablename__ = "equipment"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(128), nullable=False)
    vendor = Column(String(64), nullable=False)
    model = Column(String(64), nullable=False)
    category = Column(String(16), nullable=False)
    management_ip = Column(String(64), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    def __repr__(self) -> str:
        return f"<Equipment(id={self.id}, vendor='{self.vendor}', model='{self.model}')>"
