"""Pure computations: standings, scheduling, statistics, seeding."""
