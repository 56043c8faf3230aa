"""Reference frontend: tcod field of view and a line-based colorama console."""
