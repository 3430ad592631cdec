"""
Laundry Service Constants.
"""
from decimal import Decimal

# Clothing types and per-item prices
CLOTHING_REGULAR_WASH = 'Regular Wash'
CLOTHING_DRY_CLEAN = 'Dry Clean'
CLOTHING_DELICATE = 'Delicate'
CLOTHING_HEAVY_DUTY = 'Heavy Duty'

UNIT_PRICES = {
    CLOTHING_REGULAR_WASH: Decimal('2.50'),
    CLOTHING_DRY_CLEAN: Decimal('8.99'),
    CLOTHING_DELICATE: Decimal('4.50'),
    CLOTHING_HEAVY_DUTY: Decimal('3.50'),
}

# Unknown clothing types are charged as a regular wash
DEFAULT_UNIT_PRICE = UNIT_PRICES[CLOTHING_REGULAR_WASH]

MAX_QUANTITY = 1000
