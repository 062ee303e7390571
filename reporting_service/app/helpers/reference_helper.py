from typing import Any, Dict, Iterable, List, Optional

from shared.helpers.many2one_helper import m2o_id
from ..schemas.rent_roll_schemas import OptionSummary
from .metrics_helper import to_number


def main_property_id_of(prop: Dict[str, Any]) -> Optional[int]:
    """The main asset an asset rolls up to: its parent if set, else itself."""
    parent_id = m2o_id(prop.get("main_property_id"))
    if parent_id is not None:
        return parent_id
    return m2o_id(prop.get("id"))


def collect_main_property_ids(properties: Iterable[Dict[str, Any]]) -> List[int]:
    seen = []
    for prop in properties:
        main_id = main_property_id_of(prop)
        if main_id is not None and main_id not in seen:
            seen.append(main_id)
    return seen


def build_main_property_map(properties: Iterable[Dict[str, Any]]) -> Dict[int, Dict[str, Any]]:
    # first seen wins
    result: Dict[int, Dict[str, Any]] = {}
    for prop in properties:
        main_id = main_property_id_of(prop)
        if main_id is not None and main_id not in result:
            result[main_id] = prop
    return result


def group_tenancies_by_main_property(
    tenancies: Iterable[Dict[str, Any]]
) -> Dict[int, List[Dict[str, Any]]]:
    grouped: Dict[int, List[Dict[str, Any]]] = {}
    for tenancy in tenancies:
        main_id = m2o_id(tenancy.get("main_property_id"))
        if main_id is None:
            continue
        grouped.setdefault(main_id, []).append(tenancy)
    return grouped


def fold_tenancy_options(options: Iterable[Dict[str, Any]]) -> Dict[int, OptionSummary]:
    """
    Collapse option rows into one summary per tenancy.

    Every row bumps the count. The duration is overwritten by each later row
    that carries a value, so the last non-null duration wins.
    """
    folded: Dict[int, OptionSummary] = {}
    for option in options:
        tenancy_id = m2o_id(option.get("tenancy_id"))
        if tenancy_id is None:
            continue
        summary = folded.setdefault(tenancy_id, OptionSummary())
        summary.count += 1

        duration = option.get("duration")
        if duration is not None and duration is not False:
            summary.duration = to_number(duration)
    return folded
