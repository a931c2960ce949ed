# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

"""Figures for the admin revenue dashboard.

There is no analytics backend yet; the dashboard is served from this fixed
snapshot.
"""

import copy

_TOP_SUPPLEMENTS = [
    ("Omega-3 Fish Oil", "B00CAZAU62", 3200, 0.08, 145, 1245, 89),
    ("Vitamin D3", "B000FGDIAI", 2800, 0.06, 167, 1156, 67),
    ("Magnesium Glycinate", "B00YQZQH32", 2400, 0.07, 134, 987, 56),
    ("Probiotics", "B00JEKYNZA", 2100, 0.09, 89, 834, 45),
    ("Whey Protein", "B000QSNYGI", 1950, 0.05, 98, 756, 34),
]

_DASHBOARD = {
    "revenue": {
        "total_revenue": 45750,
        "monthly_recurring_revenue": 33250,
        "affiliate_revenue": 12500,
        "subscription_revenue": 33250,
        "avg_revenue_per_user": 53.82,
        "customer_lifetime_value": 645.84,
        "churn_rate": 7.2,
        "growth_rate": 15.5,
        "projected_revenue": {
            "next_30_days": 52800,
            "next_90_days": 71200,
            "next_year": 156800,
        },
        "top_performing_supplements": [
            {
                "name": name,
                "revenue": revenue,
                "commission_rate": rate,
                "conversions": conversions,
            }
            for name, _, revenue, rate, conversions, _, _ in _TOP_SUPPLEMENTS
        ],
    },
    "affiliate": {
        "total_clicks": 15650,
        "total_conversions": 423,
        "conversion_rate": 2.7,
        "total_commissions": 12500,
        "avg_order_value": 42.50,
        "top_products": [
            {
                "name": name,
                "asin": asin,
                "clicks": clicks,
                "conversions": product_conversions,
                "revenue": revenue,
                "commission_rate": rate,
            }
            for name, asin, revenue, rate, _, clicks, product_conversions in _TOP_SUPPLEMENTS
        ],
        "revenue_by_category": [
            {"category": "Vitamins & Minerals", "revenue": 8500, "percentage": 40.5},
            {"category": "Proteins & Fitness", "revenue": 5200, "percentage": 24.8},
            {"category": "Digestive Health", "revenue": 3800, "percentage": 18.1},
            {"category": "Immune Support", "revenue": 2100, "percentage": 10.0},
            {"category": "Cognitive Health", "revenue": 1400, "percentage": 6.6},
        ],
    },
    "engagement": {
        "active_users": 2145,
        "new_signups": 287,
        "retention_rate": 73.5,
        "avg_session_duration": 420,
        "stacks_generated": 1567,
        "ai_consultations": 3456,
        "upgrade_rate": 8.5,
        "most_popular_features": [
            {"feature": "Supplement Stack Generation", "usage": 1567, "conversion_impact": 0.85},
            {"feature": "AI Consultation", "usage": 1234, "conversion_impact": 0.78},
            {"feature": "Amazon Product Recommendations", "usage": 987, "conversion_impact": 0.65},
            {"feature": "Progress Tracking", "usage": 654, "conversion_impact": 0.72},
            {"feature": "Expert Support", "usage": 432, "conversion_impact": 0.92},
        ],
    },
    "recommendations": {
        "pricing": [
            {
                "recommendation": "Consider introducing a lower-tier plan at $9.99/month to reduce churn",
                "impact": "Could reduce churn by 15-20% and increase total revenue by 8-12%",
                "confidence": 0.85,
            },
            {
                "recommendation": "Implement usage-based pricing tiers to encourage upgrades",
                "impact": "Could increase upgrade rate to 12-15% and boost ARPU by 25%",
                "confidence": 0.75,
            },
        ],
        "product": [
            {
                "recommendation": "Improve product recommendation algorithm to increase affiliate conversions",
                "impact": "Could increase affiliate revenue by 40-60%",
                "confidence": 0.8,
            },
        ],
        "marketing": [],
    },
}


def get_dashboard() -> dict:
    """Returns a copy of the dashboard snapshot so callers can't mutate it."""
    return copy.deepcopy(_DASHBOARD)
