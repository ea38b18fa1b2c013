"""
CSV export and import functionality for SharedLedger
"""
from __future__ import annotations
import csv
from typing import Dict, List

from models import LedgerEntry
from utils import safe_float

FIELDS = ['id', 'date', 'kind', 'payer', 'amount', 'split', 'note', 'settled']


def split_to_str(split: Dict[str, float]) -> str:
    """{"b1": 0.5, "b2": 0.5} -> "b1:0.5;b2:0.5" """
    return ';'.join([f"{k}:{v}" for k, v in split.items()])


def str_to_split(s: str) -> Dict[str, float]:
    """Parse "b1:0.5;b2:0.5"; malformed shares become 0"""
    split = {}
    if s:
        for pair in s.split(';'):
            if ':' in pair:
                k, v = pair.split(':', 1)
                split[k.strip()] = safe_float(v.strip(), 0.0)
    return split


def export_entries_to_csv(entries: List[LedgerEntry], filepath: str) -> None:
    """
    Export entries to CSV file
    CSV columns: id, date, kind, payer, amount, split, note, settled
    """
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(FIELDS)
        for e in entries:
            writer.writerow([
                e.id,
                e.date,
                e.kind,
                e.payer,
                e.amount,
                split_to_str(e.split),
                e.note,
                'true' if e.settled else 'false',
            ])


def import_entries_from_csv(filepath: str) -> List[LedgerEntry]:
    """
    Import entries from CSV file.
    Rows are taken as snapshot data: a bad amount is read as 0 and is then
    ignored by the aggregator, a blank split means an equal split.
    """
    entries = []

    with open(filepath, 'r', encoding='utf-8', newline='') as f:
        reader = csv.DictReader(f)

        for row in reader:
            entries.append(LedgerEntry(
                id=row.get('id') or '',
                date=(row.get('date') or '').strip(),
                kind=(row.get('kind') or 'expense_other').strip(),
                payer=(row.get('payer') or '').strip(),
                amount=safe_float(row.get('amount'), 0.0),
                split=str_to_split(row.get('split') or ''),
                note=row.get('note') or '',
                settled=(row.get('settled') or '').strip().lower() in ('1', 'true', 'yes'),
            ))

    return entries
