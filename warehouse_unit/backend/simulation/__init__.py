"""
Simulation package.

- logistics: stock accounting, production scaling, carrier dispatch
- flow: event-reactive counters and KPIs
- engine / factory: fixed-timestep loop and assembly
"""
