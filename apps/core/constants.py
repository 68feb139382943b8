"""
Constants and lookup data for the Air Quality Health Advisory service.
"""

# India National AQI categories (CPCB)
INDIA_AQI_CATEGORIES = [
    {
        'min_value': 0,
        'max_value': 50,
        'category': 'Good',
        'color_class': 'aqi-good',
        'color_hex': '#00B050',
        'health_message': 'Minimal impact.',
    },
    {
        'min_value': 51,
        'max_value': 100,
        'category': 'Satisfactory',
        'color_class': 'aqi-satisfactory',
        'color_hex': '#92D050',
        'health_message': 'Minor breathing discomfort to sensitive people.',
    },
    {
        'min_value': 101,
        'max_value': 200,
        'category': 'Moderate',
        'color_class': 'aqi-moderate',
        'color_hex': '#FFFF00',
        'health_message': 'Breathing discomfort to people with lung disease such as asthma, and discomfort to people with heart disease, children and older adults.',
    },
    {
        'min_value': 201,
        'max_value': 300,
        'category': 'Poor',
        'color_class': 'aqi-poor',
        'color_hex': '#FF9900',
        'health_message': 'Breathing discomfort to people on prolonged exposure, and discomfort to people with heart disease.',
    },
    {
        'min_value': 301,
        'max_value': 400,
        'category': 'Very Poor',
        'color_class': 'aqi-very-poor',
        'color_hex': '#FF0000',
        'health_message': 'Respiratory illness to the people on prolonged exposure. Effect may be more pronounced in people with lung and heart diseases.',
    },
    {
        'min_value': 401,
        'max_value': 500,
        'category': 'Severe',
        'color_class': 'aqi-severe',
        'color_hex': '#C00000',
        'health_message': 'Respiratory effects even on healthy people, and serious health impacts on people with lung/heart disease.',
    },
]

# Upper AQI bound of each category, in order
AQI_THRESHOLDS = {
    'GOOD': 50,
    'SATISFACTORY': 100,
    'MODERATE': 200,
    'POOR': 300,
    'VERY_POOR': 400,
    'SEVERE': 500,
}

# Ordered band names shared by AQI_THRESHOLDS and POLLUTANT_LIMITS
BAND_ORDER = ['GOOD', 'SATISFACTORY', 'MODERATE', 'POOR', 'VERY_POOR', 'SEVERE']

# Pollutant concentration breakpoints (India NAQI).
# µg/m³ for everything except CO, which is mg/m³.
POLLUTANT_LIMITS = {
    'PM25': {
        'GOOD': 30,
        'SATISFACTORY': 60,
        'MODERATE': 90,
        'POOR': 120,
        'VERY_POOR': 250,
        'SEVERE': 380,
    },
    'PM10': {
        'GOOD': 50,
        'SATISFACTORY': 100,
        'MODERATE': 250,
        'POOR': 350,
        'VERY_POOR': 430,
        'SEVERE': 550,
    },
    'NO2': {
        'GOOD': 40,
        'SATISFACTORY': 80,
        'MODERATE': 180,
        'POOR': 280,
        'VERY_POOR': 400,
        'SEVERE': 520,
    },
    'SO2': {
        'GOOD': 40,
        'SATISFACTORY': 80,
        'MODERATE': 380,
        'POOR': 800,
        'VERY_POOR': 1600,
        'SEVERE': 2100,
    },
    'CO': {
        'GOOD': 1.0,
        'SATISFACTORY': 2.0,
        'MODERATE': 10,
        'POOR': 17,
        'VERY_POOR': 34,
        'SEVERE': 46,
    },
    'O3': {
        'GOOD': 50,
        'SATISFACTORY': 100,
        'MODERATE': 168,
        'POOR': 208,
        'VERY_POOR': 748,
        'SEVERE': 1000,
    },
}

# Pollutant names and properties, keyed by the normalised reading key
POLLUTANTS = {
    'pm25': {
        'name': 'PM2.5',
        'limit_key': 'PM25',
        'full_name': 'Fine Particulate Matter',
        'unit': 'µg/m³',
    },
    'pm10': {
        'name': 'PM10',
        'limit_key': 'PM10',
        'full_name': 'Particulate Matter',
        'unit': 'µg/m³',
    },
    'no2': {
        'name': 'NO2',
        'limit_key': 'NO2',
        'full_name': 'Nitrogen Dioxide',
        'unit': 'µg/m³',
    },
    'so2': {
        'name': 'SO2',
        'limit_key': 'SO2',
        'full_name': 'Sulfur Dioxide',
        'unit': 'µg/m³',
    },
    'co': {
        'name': 'CO',
        'limit_key': 'CO',
        'full_name': 'Carbon Monoxide',
        'unit': 'mg/m³',
    },
    'o3': {
        'name': 'O3',
        'limit_key': 'O3',
        'full_name': 'Ozone',
        'unit': 'µg/m³',
    },
}

# Spellings used by upstream feeds, mapped to reading keys
POLLUTANT_ALIASES = {
    'pm2.5': 'pm25',
    'pm25': 'pm25',
    'pm10': 'pm10',
    'no2': 'no2',
    'so2': 'so2',
    'co': 'co',
    'o3': 'o3',
    'ozone': 'o3',
}

# Data source codes
DATA_SOURCES = {
    'CURATED': 'CPCB (Govt. of India)',
    'CPCB_LIVE': 'CPCB (Govt. of India)',
    'OPENAQ': 'OpenAQ',
}

# Hour ranges (start inclusive, end exclusive) for time-of-day buckets
TIME_OF_DAY_HOURS = [
    ('morning', 5, 12),
    ('afternoon', 12, 17),
    ('evening', 17, 21),
]
