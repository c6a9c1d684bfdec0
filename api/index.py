"""Point d'entrée Vercel de l'API Wortschatz."""

from __future__ import annotations

import sys
from pathlib import Path

# Le package ``app`` vit à la racine du dépôt.
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from app.main import app  # noqa: E402,F401
