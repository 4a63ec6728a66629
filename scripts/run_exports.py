from pathlib import Path
import sys

# Ensure project root on sys.path for direct script execution
root = Path(__file__).resolve().parents[1]
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

from examplanner.config import load_config
from examplanner.data.loader import load_state
from examplanner.render.csv_out import csv_rows, write_csv_rows
from examplanner.render.text_out import fixed_width_rows, write_fixed_width
from examplanner.validate.checks import validate_all
from examplanner.validate.report import format_validation_report, write_validation_report


def main() -> None:
    cfg = load_config(root / "configs" / "planner.toml")
    state = Path(sys.argv[1]) if len(sys.argv) > 1 else root / cfg.state_file
    planner = load_state(state, cfg)
    outputs = root / cfg.outputs_dir
    print(write_csv_rows(csv_rows(planner), outputs))
    print(write_fixed_width(fixed_width_rows(planner), outputs))
    report = validate_all(planner)
    write_validation_report(report, outputs)
    print(format_validation_report(report))


if __name__ == "__main__":
    main()
