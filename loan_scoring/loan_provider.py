# loan_scoring/loan_provider.py

"""
This file acts as a centralized catalog for all lenders offered in the loan marketplace.
It defines the amount limits, rate card and charges for each provider.
Loan amount, term and interest rate bounds used for standardization are derived from here.
"""

LOAN_PROVIDERS_CATALOG = [
    {
        "provider_id": "sbi",
        "name": "State Bank of India",
        "interest_rates": [
            {"duration_years": 1, "rate": 8.5},
            {"duration_years": 3, "rate": 9.0},
            {"duration_years": 5, "rate": 9.5}
        ],
        "taxes": {
            "processing_fee_pct": 1.5,
            "documentation_charges": 1000,
            "gst_pct": 18
        },
        "terms_and_conditions": [
            "Minimum age of applicant should be 21 years",
            "Maximum age at loan maturity should not exceed 65 years",
            "Clean credit history required"
        ],
        "minimum_loan_amount": 100000,
        "maximum_loan_amount": 5000000,
        "supported_loan_types": ["business", "agriculture", "education"],
        "processing_time": "3-5 business days"
    },
    {
        "provider_id": "hdfc",
        "name": "HDFC Bank",
        "interest_rates": [
            {"duration_years": 1, "rate": 8.75},
            {"duration_years": 3, "rate": 9.25},
            {"duration_years": 5, "rate": 9.75}
        ],
        "taxes": {
            "processing_fee_pct": 2,
            "documentation_charges": 1500,
            "gst_pct": 18
        },
        "terms_and_conditions": [
            "Minimum age of applicant should be 23 years",
            "No existing loans should be present",
            "Collateral required for all business loans"
        ],
        "minimum_loan_amount": 200000,
        "maximum_loan_amount": 10000000,
        "supported_loan_types": ["business", "education"],
        "processing_time": "2-4 business days"
    },
    {
        "provider_id": "icici",
        "name": "ICICI Bank",
        "interest_rates": [
            {"duration_years": 1, "rate": 8.9},
            {"duration_years": 3, "rate": 9.3},
            {"duration_years": 5, "rate": 9.8}
        ],
        "taxes": {
            "processing_fee_pct": 1.75,
            "documentation_charges": 1250,
            "gst_pct": 18
        },
        "terms_and_conditions": [
            "Minimum age of applicant should be 22 years",
            "Credit score above 700 required",
            "Flexible collateral options available"
        ],
        "minimum_loan_amount": 150000,
        "maximum_loan_amount": 7500000,
        "supported_loan_types": ["business", "education", "agriculture"],
        "processing_time": "2-3 business days"
    },
    {
        "provider_id": "kotak",
        "name": "Kotak Mahindra Bank",
        "interest_rates": [
            {"duration_years": 1, "rate": 8.95},
            {"duration_years": 3, "rate": 9.35},
            {"duration_years": 5, "rate": 9.85}
        ],
        "taxes": {
            "processing_fee_pct": 1.9,
            "documentation_charges": 1400,
            "gst_pct": 18
        },
        "terms_and_conditions": [
            "Minimum age of applicant should be 23 years",
            "Credit score above 710 required",
            "Quick approval process for premium customers"
        ],
        "minimum_loan_amount": 250000,
        "maximum_loan_amount": 9000000,
        "supported_loan_types": ["business", "education", "agriculture"],
        "processing_time": "2-3 business days"
    },
    {
        "provider_id": "pnb",
        "name": "Punjab National Bank",
        "interest_rates": [
            {"duration_years": 1, "rate": 8.6},
            {"duration_years": 3, "rate": 9.1},
            {"duration_years": 5, "rate": 9.4}
        ],
        "taxes": {
            "processing_fee_pct": 1.6,
            "documentation_charges": 1100,
            "gst_pct": 18
        },
        "terms_and_conditions": [
            "Minimum age of applicant should be 21 years",
            "Credit score above 650 required",
            "Special rates for government employees"
        ],
        "minimum_loan_amount": 125000,
        "maximum_loan_amount": 6000000,
        "supported_loan_types": ["business", "agriculture"],
        "processing_time": "4-5 business days"
    },
    {
        "provider_id": "bob",
        "name": "Bank of Baroda",
        "interest_rates": [
            {"duration_years": 1, "rate": 8.7},
            {"duration_years": 3, "rate": 9.15},
            {"duration_years": 5, "rate": 9.55}
        ],
        "taxes": {
            "processing_fee_pct": 1.65,
            "documentation_charges": 1150,
            "gst_pct": 18
        },
        "terms_and_conditions": [
            "Minimum age of applicant should be 22 years",
            "Credit score above 660 required",
            "Special schemes for rural entrepreneurs"
        ],
        "minimum_loan_amount": 135000,
        "maximum_loan_amount": 6500000,
        "supported_loan_types": ["business", "agriculture", "education"],
        "processing_time": "3-5 business days"
    },
    # Add other lenders here following the same structure.
]
