"""Helper routines available to every story."""
from __future__ import annotations

from typing import Callable, Dict

from codex.core.rng import RNG

# Container helpers operate on Lua tables in place, so they are plain Lua.
CONTAINER_HELPERS = """
function contains(container, item)
  for _, v in pairs(container) do
    if v == item then
      return true
    end
  end
  return false
end

function insert(container, item)
  table.insert(container, item)
end

function remove(container, item)
  for i, v in ipairs(container) do
    if v == item then
      table.remove(container, i)
      return true
    end
  end
  return false
end

function remove_all(container, item)
  local i = 1
  while i <= #container do
    if container[i] == item then
      table.remove(container, i)
    else
      i = i + 1
    end
  end
end

function count(container, item)
  local total = 0
  for _, v in pairs(container) do
    if v == item then
      total = total + 1
    end
  end
  return total
end
"""


def dice_helpers(rng: RNG) -> Dict[str, Callable[..., int]]:
    """Return the ``dice`` and ``d`` callables bound to ``rng``."""

    def dice(count: int, sides: int, modifier: int | None = None) -> int:
        rolls = int(count)
        faces = int(sides)
        if rolls < 0 or faces < 1:
            raise ValueError(f"dice({rolls}, {faces}) is not a valid roll.")
        total = sum(rng.randint(1, faces) for _ in range(rolls))
        return total + int(modifier or 0)

    def d(sides: int) -> int:
        return dice(1, sides, 0)

    return {"dice": dice, "d": d}
