"""WRO route planner core: waypoint sections in, robot instructions out."""
