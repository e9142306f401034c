# API Route Constants

# Base API
API_BASE = '/api'

# Reservation routes
RESERVATION_BASE = f'{API_BASE}/reservation'
RESERVATION_CREATE = RESERVATION_BASE
RESERVATION_GET = f'{RESERVATION_BASE}/{{reservation_id}}'
RESERVATION_CONFIRM = f'{RESERVATION_BASE}/{{reservation_id}}/confirm'
RESERVATION_RELEASE = f'{RESERVATION_BASE}/{{reservation_id}}'

# Show routes
SHOW_BASE = f'{API_BASE}/show'
SHOW_SEATS = f'{SHOW_BASE}/{{show_id}}/seats'
