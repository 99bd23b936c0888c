import json
import logging
import os
from copy import deepcopy
from datetime import date, time

from .calendar_logic import resolve_cycle
from .models import (
    CustomPattern, Holiday, HolidayRule, Parent, ScheduleConfig, pattern_from_id,
)
from .patterns import DEFAULT_PATTERNS, PatternTable

DEFAULT_CONFIG = {
    'parent_names': {'A': 'Parent A', 'B': 'Parent B'},
    'colors': {'A': '#A0C4FF', 'B': '#FFD97D'},
    'months_ahead': 12,
    'document_layout': 'table',
}


def _config_path():
    base = os.path.join(os.path.expanduser('~'), '.custodycompass')
    os.makedirs(base, exist_ok=True)
    return os.path.join(base, 'custodycompass_config.json')


def load_config(path: str = None) -> dict:
    path = path or _config_path()
    cfg = deepcopy(DEFAULT_CONFIG)
    if not os.path.exists(path):
        return cfg
    try:
        with open(path, 'r', encoding='utf-8') as f:
            stored = json.load(f)
    except (OSError, ValueError) as e:
        logging.warning(f"[CustodyCompass] Konfiguration {path} nicht lesbar, nutze Defaults: {e}")
        return cfg
    if not isinstance(stored, dict):
        logging.warning(f"[CustodyCompass] Konfiguration {path} nicht lesbar, nutze Defaults: "
                        f"erwartet JSON-Objekt, nicht {type(stored).__name__}")
        return cfg
    for key, value in stored.items():
        # verschachtelte Mappings einzeln übernehmen
        if isinstance(value, dict) and isinstance(cfg.get(key), dict):
            cfg[key].update(value)
        else:
            cfg[key] = value
    return cfg


def save_config(cfg: dict, path: str = None):
    path = path or _config_path()
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(cfg, f, ensure_ascii=False, indent=2)


# Schedule <-> JSON

def schedule_to_dict(config: ScheduleConfig) -> dict:
    data = {
        'pattern': config.pattern_id,
        'start_date': config.start_date.isoformat(),
        'starting_parent': Parent.parse(config.starting_parent).value,
        'exchange_time': config.exchange_time,
        'exchange_location': config.exchange_location,
        'alternate_location': config.alternate_location,
        'split_cutoff': config.split_cutoff.strftime('%H:%M'),
        'holidays': [
            {
                'name': h.name,
                'rule': HolidayRule.parse(h.rule).value,
                'enabled': h.enabled,
                'dates': sorted(d.isoformat() for d in h.dates),
            }
            for h in config.holidays
        ],
    }
    if isinstance(config.pattern, CustomPattern):
        data['custom_cycle'] = list(config.pattern.cycle)
    return data


def schedule_from_dict(data: dict, patterns: PatternTable = DEFAULT_PATTERNS) -> ScheduleConfig:
    """
    Baut eine ScheduleConfig aus der JSON-Form und validiert sie sofort:
    unbekanntes Pattern, leerer/ungültiger Zyklus, falscher Elternteil
    oder ungültige Daten führen direkt zu einer Exception.
    """
    holidays = tuple(
        Holiday(
            name=h['name'],
            rule=HolidayRule.parse(h.get('rule', 'alternate')),
            enabled=bool(h.get('enabled', True)),
            dates=frozenset(date.fromisoformat(d) for d in h.get('dates', [])),
        )
        for h in data.get('holidays', [])
    )
    cutoff = data.get('split_cutoff')
    config = ScheduleConfig(
        pattern=pattern_from_id(data['pattern'], data.get('custom_cycle')),
        start_date=date.fromisoformat(data['start_date']),
        starting_parent=Parent.parse(data.get('starting_parent', 'A')),
        exchange_time=data.get('exchange_time', ''),
        exchange_location=data.get('exchange_location', ''),
        alternate_location=data.get('alternate_location', ''),
        holidays=holidays,
        split_cutoff=time.fromisoformat(cutoff) if cutoff else time(12, 0),
    )
    resolve_cycle(config, patterns)
    return config


def save_schedule(config: ScheduleConfig, path: str):
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(schedule_to_dict(config), f, ensure_ascii=False, indent=2)


def load_schedule(path: str, patterns: PatternTable = DEFAULT_PATTERNS) -> ScheduleConfig:
    with open(path, 'r', encoding='utf-8') as f:
        return schedule_from_dict(json.load(f), patterns)
