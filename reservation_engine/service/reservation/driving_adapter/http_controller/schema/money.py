from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer


# Amounts always leave the API as strings with two decimal places, e.g. "25.00"
Money = Annotated[
    Decimal,
    PlainSerializer(lambda value: f'{value:.2f}', return_type=str, when_used='json'),
]
