# NOTE: MODIFY TS ONLY WHEN U WANNA CHANGE THE OVERALL PARAMETERS OF THE OBSERVATORY.

CITIES = [
    "Islamabad", "Lahore", "Karachi", "Peshawar", "Quetta",
    "Rawalpindi", "Multan", "Faisalabad", "Sialkot", "Gujranwala",
    "Sargodha", "Bahawalpur", "Sukkur", "Larkana", "Hyderabad",
    "Bannu", "Khuzdar",
]


def month_range(start_year=2023, start_month=3, end_year=2024, end_month=12):

    # 'YYYY-MM' keys, inclusive on both ends

    months = []
    for y in range(start_year, end_year + 1):
        first = start_month if y == start_year else 1
        last = end_month if y == end_year else 12
        for m in range(first, last + 1):
            months.append(f"{y}-{m:02d}")
    return months


MONTHS = month_range()

CATEGORIES = [
    "1. Food Staples & Grains",
    "2. Meat, Poultry & Dairy",
    "3. Oils, Condiments & Sweeteners",
    "4. Fruits & Vegetables",
    "5. Non-Food Essentials",
    "6. Utilities & Transport",
    "7. Clothing & Miscellaneous",
]

METRICS = ('degree', 'closeness', 'betweenness', 'eigenvector')

# centrality

EIGENVECTOR_ITERATIONS = 50

# physics - tuned by eye for ~17 nodes on an 800x600 canvas

REPULSION = 8000.0
SPRING_K = 0.05
REST_LENGTH = 150.0
DAMPING = 0.6
CENTER_FORCE = 0.02
PADDING = 40.0

INITIAL_CENTER = (400.0, 300.0)
INITIAL_SPREAD = 200.0

# view

MIN_SCALE = 0.1
MAX_SCALE = 5.0
ZOOM_STEP = 1.2
WHEEL_SENSITIVITY = 0.001
LABEL_MIN_SCALE = 0.5
FIT_SCALE = 0.8

NODE_RADIUS = 6.0
EDGE_WIDTH = 1.0
NODE_STROKE = 2.0
LABEL_FONT_SIZE = 10.0

# composite score presets (order follows METRICS)

CORRELATION_WEIGHTS = {
    'degree': 0.4,
    'closeness': 0.2,
    'betweenness': 0.2,
    'eigenvector': 0.2,
}

# data source

DEFAULT_API_URL = "http://localhost:5000/api/data/graphs"
DEFAULT_FETCH_TIMEOUT = 2.0
DEFAULT_FPS = 60
