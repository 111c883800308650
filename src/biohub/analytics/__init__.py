"""Species-speed analytics.

Turns the three species-speed datasets into validated records, grouped
statistics, chart draw specifications and plain-text insights:

- records and parser: typed rows and their validation
- aggregation: mean speed per diet or conservation status
- scales, geometry and charts: projection into pixel space
- insights: comparative findings
- orchestrator: the load, parse and draw cycle
"""
