"""
Pocket RoK
A pocket-sized kingdom builder: grow four resources, upgrade buildings,
train an army, scout through the fog and clear the camps around you.

Features:
- Hourly production driven by building levels
- City-hall gated upgrades, all-or-nothing training
- Fog of War with a gold-paid scout
- Deterministic camp battles with loot
- JSON save slot
"""
