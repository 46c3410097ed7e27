import logging
import sys

from src.api.app import create_app
from src.api.deps import get_settings
from src.app_shell.config import validate_ops_rules
from src.rules.loader import load_rules

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

settings = get_settings()

# Load rules and validate before serving (fail-fast)
try:
    rules = load_rules(settings.rules_path)
    validate_ops_rules(rules)
    print(f"INFO: Rules loaded from {settings.rules_path}")
except Exception as e:
    print(f"CRITICAL: Rules load failed: {e}", file=sys.stderr)
    sys.exit(1)

app = create_app(settings, rules)
