# prints the centrality ranking for one month (or every month) to the terminal.
# usage: python -m observatory.report [month|all] [threshold] [method]

import math
import sys

from observatory.constants import METRICS
from observatory.data_source import load_series
from observatory.driver import ObservatoryDriver
from observatory.logging_config import setup_logging
from observatory.weighting import WeightingMethod

USAGE = "usage: python -m observatory.report [month|all] [threshold] [method]"


def print_month(driver, top=None):

    stats = driver.similarity_stats()
    print(f"\n{driver.month}  threshold={driver.threshold:.2f}  method={driver.method.label}")
    print(f"similarity min={stats['min']:.3f} max={stats['max']:.3f} avg={stats['avg']:.3f}")

    frame = driver.metrics.to_frame(driver.labels)
    frame['Composite'] = driver.composite()
    frame = frame.sort_values('Composite', ascending=False)
    if top:
        frame = frame.head(top)

    print(f"{'City':<14}" + ''.join(f"{m.title():>13}" for m in METRICS) + f"{'Composite':>13}")
    for _, row in frame.iterrows():
        line = f"{row['Node']:<14}"
        line += ''.join(f"{row[m.title()]:>13.4f}" for m in METRICS)
        line += f"{row['Composite']:>13.4f}"
        print(line)


def main(argv=None):

    argv = sys.argv[1:] if argv is None else argv
    month = argv[0] if len(argv) > 0 else 'all'
    try:
        threshold = float(argv[1]) if len(argv) > 1 else 0.0
        if not math.isfinite(threshold):
            raise ValueError(f"threshold must be a number, got {argv[1]}")
        method = WeightingMethod.from_label(argv[2]) if len(argv) > 2 else WeightingMethod.EQUAL
    except ValueError as e:
        print(f"{e}\n{USAGE}")
        print(f"methods: {', '.join(WeightingMethod.labels())}")
        return 1

    setup_logging()
    series = load_series()
    driver = ObservatoryDriver(series, threshold=threshold, method=method)

    print(f"{series.node_count} cities, {len(series)} months (source: {series.source})")

    if month == 'all':
        for i in range(len(series)):
            driver.set_time_index(i)
            print_month(driver, top=5)
        return 0

    if month not in series.months:
        print(f"unknown month {month}, have {series.months[0]} .. {series.months[-1]}")
        return 1

    driver.set_time_index(series.months.index(month))
    print_month(driver)
    return 0


if __name__ == '__main__':
    sys.exit(main())
