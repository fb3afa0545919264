"""
Default canvas geometry shared by settings, layout, routing and gestures.

`Settings` takes its defaults from here; the module-level function defaults
in the flowchart and editor packages do too.
"""

# Fixed node rectangle, in pixels
NODE_WIDTH = 160.0
NODE_HEIGHT = 80.0

# Drag samples snap to multiples of this
GRID_SIZE = 20

# Control point offset for cubic edge routes
ROUTE_TANGENT = 60.0

# Connection handle square and invisible edge hit stroke
HANDLE_SIZE = 24.0
EDGE_HIT_WIDTH = 20.0

# Auto-layout spacing
HORIZONTAL_GAP = 60.0
VERTICAL_GAP = 120.0
TOP_MARGIN = 100.0
CANVAS_WIDTH = 1000.0
