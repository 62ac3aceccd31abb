"""
Pocket RoK Frontends
Renderers that draw a Game and turn input into intents.

A renderer needs:
- __init__(width, height)
- render_frame(game, debug_mode)
- handle_input() -> dict with 'quit', 'cell_click', 'action'
- cleanup()

    renderer = PygameRenderer(976, 640)
    while game.running:
        state = renderer.handle_input()
        ...
        renderer.render_frame(game)
"""

# Note: Don't import renderers here to avoid importing pygame
# when it might not be needed. Import directly in main.py instead.
