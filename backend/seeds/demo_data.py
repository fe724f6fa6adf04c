"""Demo dataset for local development.
(Consumed by scripts/seed_demo.py; single source of truth for demo rows.)
"""
from datetime import date

LOCATIONS = [
    {'location_name': 'Downtown Bistro', 'restaurant_id': 1, 'address': '120 Main St', 'city': 'Austin',
     'state': 'TX', 'zip_code': '78701', 'phone': '512-555-0101', 'monthly_target_waste_percentage': 4.0},
    {'location_name': 'Riverside Grill', 'restaurant_id': 1, 'address': '8 River Rd', 'city': 'Austin',
     'state': 'TX', 'zip_code': '78703', 'phone': '512-555-0102', 'monthly_target_waste_percentage': 3.5},
]

# password comes from SEED_DEMO_PASSWORD; location is an index into LOCATIONS (None = all-location role)
USERS = [
    {'email': 'admin@saveplate.example', 'full_name': 'Avery Admin', 'role': 'admin', 'location': None},
    {'email': 'manager@saveplate.example', 'full_name': 'Morgan Manager', 'role': 'manager', 'location': 0},
    {'email': 'operator@saveplate.example', 'full_name': 'Oakley Operator', 'role': 'operator', 'location': 0},
]

KB_ARTICLES = [
    {'slug': 'getting-started-first-log', 'category': 'getting-started', 'title': 'Log your first waste entry',
     'summary': 'A two minute walkthrough of the waste logging form.',
     'content': 'Open Log, pick a category, enter the food item and quantity, then save. '
                'Managers can choose a different location before saving.',
     'search_keywords': ['log', 'first', 'entry', 'quick start']},
    {'slug': 'waste-categories-explained', 'category': 'waste-tracking', 'title': 'Waste categories explained',
     'summary': 'When to use Prep Waste, Spoilage, Plate Waste or Other.',
     'content': 'Prep Waste is trim and peel. Spoilage covers expired or spoiled stock. '
                'Plate Waste is what comes back from the dining room.',
     'search_keywords': ['category', 'spoilage', 'prep', 'plate']},
    {'slug': 'reading-the-dashboard', 'category': 'analytics-insights', 'title': 'Reading the dashboard',
     'summary': 'Totals, trends and the comparison with the previous period.',
     'content': 'The dashboard compares the selected 30, 60 or 90 day window against the window before it.',
     'search_keywords': ['dashboard', 'trend', 'report']},
    {'slug': 'esg-report-basics', 'category': 'esg-tax', 'title': 'ESG report basics',
     'summary': 'What goes into a monthly ESG report.',
     'content': 'ESG reports summarise food waste weight, cost and estimated carbon impact per period.',
     'search_keywords': ['esg', 'carbon', 'tax']},
]

ESG_REPORTS = [
    {'location': 0, 'restaurant_id': 1, 'report_type': 'monthly',
     'report_period_start': date(2024, 1, 1), 'report_period_end': date(2024, 1, 31),
     'food_waste_kg': 412.0, 'food_waste_cost': 2890.0, 'total_waste_reduction_percentage': 12.5,
     'carbon_impact_kg': 1030.0, 'report_data': {'diverted_kg': 96.0}},
]

BENCHMARKS = [
    {'location': 0, 'period_start': date(2024, 1, 1), 'period_end': date(2024, 1, 31),
     'total_waste_lbs': 908.3, 'total_waste_cost': 2890.0, 'waste_percentage_of_sales': 3.1,
     'top_wasted_items': [{'name': 'Bread', 'cost': 410.0}, {'name': 'Romaine', 'cost': 265.0}]},
]

VENDORS = [
    {'name': 'Hill Country Produce', 'contact_name': 'Rosa Vega', 'email': 'orders@hcproduce.example',
     'phone': '512-555-0140', 'city': 'Austin', 'state': 'TX', 'rating': 4.6, 'delivery_time_avg': 2,
     'payment_terms': 'Net 15', 'categories': ['produce']},
    {'name': 'Lone Star Dairy', 'contact_name': 'Dale Pruitt', 'email': 'sales@lsdairy.example',
     'phone': '512-555-0177', 'city': 'Round Rock', 'state': 'TX', 'rating': 4.2, 'delivery_time_avg': 3,
     'payment_terms': 'Net 30', 'categories': ['dairy', 'eggs']},
]

# location and supplier are indexes into LOCATIONS and VENDORS
INVENTORY_ITEMS = [
    {'location': 0, 'supplier': 0, 'name': 'Romaine', 'category': 'produce', 'current_stock': 12, 'unit': 'heads',
     'reorder_point': 20, 'reorder_quantity': 48, 'cost_per_unit': 1.15, 'sku': 'PRD-ROM'},
    {'location': 0, 'supplier': 1, 'name': 'Whole milk', 'category': 'dairy', 'current_stock': 9, 'unit': 'gal',
     'reorder_point': 6, 'reorder_quantity': 12, 'cost_per_unit': 3.4, 'sku': 'DRY-MLK'},
]
