"""
Snake Arcade - Grid-based snake game engine.

Modules:
- core: Abstract session interface and tick schedulers
- games: Game implementations (Snake engine, rival AI, session state machine)
- services: Clients for external collaborators (obstacle maps, narration, scores)
- utils: Configuration loading
"""

__version__ = "1.0.0"
