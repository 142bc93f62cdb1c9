"""Bracketing-pair search over a flow-sorted pump list."""

from typing import Dict, List, Optional, Sequence


def find_bracketing_pumps(pumps: Sequence[Dict], target_gpm: float) -> List[Dict]:
    """Return the pumps that bracket ``target_gpm``.

    ``pumps`` must be sorted ascending by ``gpm_value``.

    - Exact match: that pump plus the next one with a strictly greater flow.
    - Otherwise: the highest flow below the target and the lowest flow
      above it, whichever exist.

    The result keeps ascending order, holds at most two pumps and is empty
    only when ``pumps`` is empty.
    """
    below: Optional[Dict] = None
    above: Optional[Dict] = None

    for index, pump in enumerate(pumps):
        flow = pump["gpm_value"]
        if flow == target_gpm:
            match = [pump]
            for candidate in pumps[index + 1:]:
                if candidate["gpm_value"] > flow:
                    match.append(candidate)
                    break
            return match
        if flow < target_gpm:
            below = pump
        else:
            above = pump
            break

    return [p for p in (below, above) if p is not None]
