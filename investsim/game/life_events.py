"""Static life event pools. Amounts are in rupees; losses are negative."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LifeEvent:
    message: str
    amount: float


LOSS_EVENTS: tuple[LifeEvent, ...] = (
    LifeEvent("House robbery during Diwali", -15000),
    LifeEvent("Family medical emergency", -30000),
    LifeEvent("Vehicle repair after monsoon", -20000),
    LifeEvent("Wedding shopping expenses", -15000),
    LifeEvent("Health insurance deductible", -25000),
    LifeEvent("Home repairs after flooding", -45000),
    LifeEvent("Laptop suddenly stopped working", -50000),
    LifeEvent("Legal fees for property dispute", -35000),
    LifeEvent("AC breakdown in peak summer", -18000),
    LifeEvent("Parent hospitalization costs", -40000),
    LifeEvent("Car accident - insurance excess", -22000),
    LifeEvent("Stolen mobile phone", -12000),
    LifeEvent("Urgent home appliance replacement", -28000),
    LifeEvent("Child school fees increase", -15000),
    LifeEvent("Unexpected tax liability", -35000),
    LifeEvent("Emergency dental treatment", -18000),
    LifeEvent("Bike accident repair", -14000),
    LifeEvent("Flooding damaged furniture", -25000),
    LifeEvent("Friend wedding gift expected", -10000),
    LifeEvent("Pet medical emergency", -20000),
)

GAIN_EVENTS: tuple[LifeEvent, ...] = (
    LifeEvent("Diwali bonus from company", 50000),
    LifeEvent("Freelance project bonus", 40000),
    LifeEvent("Side business profit", 35000),
    LifeEvent("Performance bonus at work", 45000),
    LifeEvent("Tax refund received", 20000),
    LifeEvent("Sold old items online", 15000),
    LifeEvent("Investment dividend received", 30000),
)
