'''
Static sector reference tables for Kenyan SMEs.

These tables are versioned reference data, not live market data. Bump
TABLE_VERSION whenever a benchmark changes so stored valuations can be
traced back to the table they were computed with.
'''

from typing import Any, Dict, List, Tuple

TABLE_VERSION = '2024.1'

# Discount rate applied when a sector key is not registered.
UNKNOWN_SECTOR_RATE = 0.28

BASE_RISK_FREE_RATE = 0.09  # Kenyan government bond yield
MARKET_RISK_PREMIUM = 0.08  # emerging market equity premium

MACRO_RISK_FACTORS: Dict[str, float] = {
    'currency_volatility': 0.02,
    'political_risk': 0.03,
    'interest_rate_volatility': 0.02,
    'infrastructure_risk': 0.01,
}

SECTOR_PROFILES: Dict[str, Dict[str, Any]] = {
    'retail': {
        'name': 'Retail & Wholesale',
        'description': ('Retail shops, supermarkets, and wholesale '
                        'distributors in Kenya'),
        'risk_tier': 'high',
        'base_discount_rate': 0.20,
        'risk_premium': 0.08,
        'ebitda_multiple': {'min': 2.5, 'max': 4.0},
        'revenue_multiple': {'min': 0.3, 'max': 0.8},
        'key_factors': [
            'Customer footfall',
            'Location quality',
            'Inventory turnover',
            'Supplier contracts',
            'Competition intensity',
        ],
    },
    'hospitality': {
        'name': 'Hospitality (Hotels, Restaurants)',
        'description': ('Hotels, restaurants, and tourism-related '
                        'hospitality businesses'),
        'risk_tier': 'very-high',
        'base_discount_rate': 0.22,
        'risk_premium': 0.12,
        'ebitda_multiple': {'min': 3.0, 'max': 5.0},
        'revenue_multiple': {'min': 1.5, 'max': 3.0},
        'key_factors': [
            'Occupancy rates',
            'Seasonal cycles',
            'Security & political risk',
            'Online reviews/reputation',
            'Location (tourism hubs)',
            'COVID recovery',
        ],
    },
    'agribusiness': {
        'name': 'Agribusiness & Agritech',
        'description': ('Farming, value-addition, agritech, export crops, '
                        'horticulture'),
        'risk_tier': 'high',
        'base_discount_rate': 0.20,
        'risk_premium': 0.08,
        'ebitda_multiple': {'min': 3.0, 'max': 5.5},
        'revenue_multiple': {'min': 0.5, 'max': 1.5},
        'key_factors': [
            'Land quality & location',
            'Weather cycles',
            'Commodity prices',
            'Export certifications',
            'Contract farming agreements',
            'Seasonal cash flow',
        ],
    },
    'tech': {
        'name': 'Tech & Digital Startups',
        'description': ('SaaS, fintech, e-commerce, digital services, '
                        'software companies'),
        'risk_tier': 'high',
        'base_discount_rate': 0.22,
        'risk_premium': 0.10,
        'ebitda_multiple': {'min': 4.0, 'max': 8.0},
        'revenue_multiple': {'min': 3.0, 'max': 8.0},
        'key_factors': [
            'Growth rate',
            'User retention & churn',
            'MRR/ARR',
            'Market scalability',
            'Regional expansion (East Africa)',
            'Technology moat',
            'Team capability',
        ],
    },
    'manufacturing': {
        'name': 'Manufacturing & Industrial',
        'description': 'Light & heavy manufacturing, industrial production',
        'risk_tier': 'moderate',
        'base_discount_rate': 0.18,
        'risk_premium': 0.06,
        'ebitda_multiple': {'min': 4.0, 'max': 7.0},
        'revenue_multiple': {'min': 0.8, 'max': 2.0},
        'key_factors': [
            'Capacity utilization',
            'Production efficiency',
            'Equipment age & maintenance',
            'Long-term contracts',
            'Raw material costs',
            'Export certifications',
        ],
    },
    'services': {
        'name': 'Professional Services',
        'description': ('Consulting, accounting, legal, marketing, cleaning, '
                        'security services'),
        'risk_tier': 'low',
        'base_discount_rate': 0.16,
        'risk_premium': 0.04,
        'ebitda_multiple': {'min': 3.5, 'max': 6.0},
        'revenue_multiple': {'min': 1.0, 'max': 2.5},
        'key_factors': [
            'Client base stability',
            'Billable hours & utilization',
            'Reputation & track record',
            'Team retention',
            'Long-term contracts',
            'Scalability without proportional cost increase',
        ],
    },
}

# Multiples observed in SME transactions, used by the comparable methods.
# Tech businesses trade on revenue only; EBITDA is rarely meaningful.
TRANSACTION_MULTIPLES: Dict[str, Dict[str, Dict[str, float]]] = {
    'retail': {
        'revenue': {'min': 0.3, 'max': 0.8},
        'ebitda': {'min': 2.5, 'max': 4.0},
    },
    'hospitality': {
        'revenue': {'min': 1.5, 'max': 3.0},
        'ebitda': {'min': 3.0, 'max': 5.0},
    },
    'agribusiness': {
        'revenue': {'min': 0.5, 'max': 1.5},
        'ebitda': {'min': 3.0, 'max': 5.5},
    },
    'tech': {
        'revenue': {'min': 3.0, 'max': 8.0},
    },
    'manufacturing': {
        'revenue': {'min': 0.8, 'max': 2.0},
        'ebitda': {'min': 4.0, 'max': 7.0},
    },
    'services': {
        'revenue': {'min': 1.0, 'max': 2.5},
        'ebitda': {'min': 3.5, 'max': 6.0},
    },
}

VALUE_DRIVERS: Dict[str, List[Tuple[str, int]]] = {
    'retail': [
        ('Improve financial record quality & formalize accounting', 15),
        ('Reduce dependency on owner/founder', 12),
        ('Establish long-term supplier contracts', 10),
        ('Reduce customer concentration (top 3 < 30%)', 10),
        ('Invest in inventory management systems', 8),
        ('Expand into adjacent locations', 12),
    ],
    'hospitality': [
        ('Improve occupancy rates & pricing strategy', 20),
        ('Formalize booking systems (online presence)', 14),
        ('Establish corporate/tour operator partnerships', 12),
        ('Reduce owner operational dependency', 15),
        ('Diversify revenue (events, conferences, etc.)', 10),
        ('Certify staff & implement quality standards', 8),
    ],
    'agribusiness': [
        ('Secure long-term offtake agreements', 18),
        ('Improve yield through better inputs/training', 14),
        ('Reduce market price dependency (contracts)', 16),
        ('Invest in land formalization & title', 12),
        ('Diversify crops/products', 10),
        ('Establish irrigation systems', 13),
    ],
    'tech': [
        ('Grow monthly recurring revenue (MRR)', 20),
        ('Reduce customer acquisition cost (CAC)', 12),
        ('Improve retention rates & reduce churn', 15),
        ('Build proprietary technology/IP', 18),
        ('Achieve profitability milestone', 16),
        ('Expand into adjacent markets', 14),
    ],
    'manufacturing': [
        ('Secure long-term customer contracts', 16),
        ('Improve capacity utilization', 12),
        ('Reduce working capital requirements', 10),
        ('Invest in modern equipment/automation', 14),
        ('Develop proprietary products/IP', 15),
        ('Reduce supplier concentration & costs', 11),
    ],
    'services': [
        ('Build repeatable service delivery model', 14),
        ('Reduce founder/key person dependency', 16),
        ('Establish high-value client contracts', 12),
        ('Improve margins through service packaging', 13),
        ('Build team & management structure', 15),
        ('Achieve consistent revenue growth >20% YoY', 18),
    ],
}
