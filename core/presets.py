DISCLAIMER = ("Affordability figures are computed from applicant-declared income and obligations "
"and mirror the portal's published FOIR bands. Recommended rates follow the standard risk-tier table; "
"external verification, credit policy and the sanctioning officer's judgement prevail. "
"Offline estimates are indicative only until confirmed by the server calculation.")

EMPLOYMENT_CATEGORIES = ["SALARIED", "SELF_EMPLOYED", "BUSINESS_OWNER", "PROFESSIONAL",
"FREELANCER", "RETIRED", "STUDENT", "UNEMPLOYED"]

# Inclusive upper bounds, evaluated in order; anything above the last bound is HIGH_RISK.
FOIR_BANDS = [
    (40.0, "EXCELLENT", "Excellent financial health. Strong repayment capacity."),
    (55.0, "GOOD", "Good financial health. Comfortable repayment capacity."),
    (70.0, "ACCEPTABLE", "Acceptable FOIR. You meet the eligibility criteria."),
]
HIGH_RISK_MESSAGE = "FOIR exceeds recommended limit. Consider reducing loan amount or existing obligations."
ZERO_INCOME_MESSAGE = "Monthly income is zero; FOIR cannot be computed. Add an income source to assess affordability."
MAX_ACCEPTABLE_FOIR = 70.0

# Evaluated top-down, first match wins. ``None`` means any risk level.
RATE_TIERS = [
    (750, ("LOW",), 10.5),
    (700, ("LOW", "MEDIUM"), 11.5),
    (650, ("MEDIUM",), 12.5),
    (600, None, 13.5),
    (550, None, 14.5),
    (500, None, 15.5),
]
FLOOR_RATE = 16.5
RATE_DEVIATION_TOLERANCE = 2.0

LOAN_PRODUCTS = {
    "PERSONAL_LOAN": {"label": "Personal Loan", "rate": 10.5},
    "SALARY_ADVANCE": {"label": "Salary Advance", "rate": 12.0},
    "HOME_LOAN": {"label": "Home Loan", "rate": 8.5},
    "PROPERTY_LOAN": {"label": "Property Loan", "rate": 9.5},
    "LOAN_AGAINST_PROPERTY": {"label": "Loan Against Property", "rate": 12.0},
    "CAR_LOAN": {"label": "Car Loan", "rate": 9.0},
    "TWO_WHEELER_LOAN": {"label": "Two Wheeler Loan", "rate": 11.0},
    "COMMERCIAL_VEHICLE_LOAN": {"label": "Commercial Vehicle Loan", "rate": 12.0},
    "BUSINESS_LOAN": {"label": "Business Loan", "rate": 12.0},
    "WORKING_CAPITAL_LOAN": {"label": "Working Capital Loan", "rate": 12.0},
    "EQUIPMENT_FINANCE": {"label": "Equipment Finance", "rate": 12.0},
    "CROP_LOAN": {"label": "Crop Loan", "rate": 12.0},
    "FARM_EQUIPMENT_LOAN": {"label": "Farm Equipment Loan", "rate": 12.0},
    "EDUCATION_LOAN": {"label": "Education Loan", "rate": 7.5},
    "PROFESSIONAL_COURSE_LOAN": {"label": "Professional Course Loan", "rate": 12.0},
    "GOLD_LOAN": {"label": "Gold Loan", "rate": 7.0},
    "CREDIT_CARD": {"label": "Credit Card", "rate": 12.0},
    "OVERDRAFT_FACILITY": {"label": "Overdraft Facility", "rate": 12.0},
}
DEFAULT_PRODUCT_RATE = 12.0

_COMPANY = ["SALARIED", "SELF_EMPLOYED", "BUSINESS_OWNER", "PROFESSIONAL"]
ELIGIBILITY_MATRIX = {
    "PERSONAL_LOAN": _COMPANY + ["FREELANCER"],
    "SALARY_ADVANCE": ["SALARIED"],
    "HOME_LOAN": list(_COMPANY),
    "PROPERTY_LOAN": list(_COMPANY),
    "LOAN_AGAINST_PROPERTY": _COMPANY + ["RETIRED"],
    "CAR_LOAN": list(_COMPANY),
    "TWO_WHEELER_LOAN": _COMPANY + ["FREELANCER", "STUDENT"],
    "COMMERCIAL_VEHICLE_LOAN": ["SELF_EMPLOYED", "BUSINESS_OWNER"],
    "BUSINESS_LOAN": ["SELF_EMPLOYED", "BUSINESS_OWNER", "PROFESSIONAL"],
    "WORKING_CAPITAL_LOAN": ["BUSINESS_OWNER", "SELF_EMPLOYED"],
    "EQUIPMENT_FINANCE": ["BUSINESS_OWNER", "SELF_EMPLOYED", "PROFESSIONAL"],
    "CROP_LOAN": ["SELF_EMPLOYED"],
    "FARM_EQUIPMENT_LOAN": ["SELF_EMPLOYED"],
    "EDUCATION_LOAN": ["STUDENT"],
    "PROFESSIONAL_COURSE_LOAN": ["STUDENT", "PROFESSIONAL", "SALARIED"],
    "GOLD_LOAN": list(EMPLOYMENT_CATEGORIES),
    "CREDIT_CARD": list(_COMPANY),
    "OVERDRAFT_FACILITY": ["SALARIED", "BUSINESS_OWNER"],
}

MIN_INCOME_BY_LOAN = {
    "PERSONAL_LOAN": 25000.0, "SALARY_ADVANCE": 20000.0, "HOME_LOAN": 40000.0,
    "PROPERTY_LOAN": 40000.0, "LOAN_AGAINST_PROPERTY": 30000.0, "CAR_LOAN": 30000.0,
    "TWO_WHEELER_LOAN": 15000.0, "COMMERCIAL_VEHICLE_LOAN": 40000.0, "BUSINESS_LOAN": 50000.0,
    "WORKING_CAPITAL_LOAN": 60000.0, "EQUIPMENT_FINANCE": 40000.0, "CROP_LOAN": 20000.0,
    "FARM_EQUIPMENT_LOAN": 25000.0, "EDUCATION_LOAN": 30000.0, "PROFESSIONAL_COURSE_LOAN": 25000.0,
    "GOLD_LOAN": 0.0, "CREDIT_CARD": 25000.0, "OVERDRAFT_FACILITY": 30000.0,
}
DEFAULT_MIN_INCOME = 25000.0

# Months of continuous employment; loan types not listed here have no requirement.
MIN_EMPLOYMENT_MONTHS = {
    "PERSONAL_LOAN": {"SALARIED": 12, "SELF_EMPLOYED": 24, "BUSINESS_OWNER": 24, "PROFESSIONAL": 24, "FREELANCER": 18},
    "HOME_LOAN": {"SALARIED": 24, "SELF_EMPLOYED": 36, "BUSINESS_OWNER": 36, "PROFESSIONAL": 36},
    "BUSINESS_LOAN": {"SELF_EMPLOYED": 24, "BUSINESS_OWNER": 24, "PROFESSIONAL": 24},
}

# Monthly income floor for the income step.
INCOME_FLOORS = {c: 10000.0 for c in EMPLOYMENT_CATEGORIES}
INCOME_FLOORS["UNEMPLOYED"] = 0.0

# Income type is read-only for these categories.
FORCED_INCOME_TYPES = {"SALARIED": "SALARY", "SELF_EMPLOYED": "BUSINESS", "BUSINESS_OWNER": "BUSINESS"}
DEFAULT_INCOME_TYPES = {
    "SALARIED": "SALARY", "SELF_EMPLOYED": "BUSINESS", "BUSINESS_OWNER": "BUSINESS",
    "PROFESSIONAL": "BUSINESS", "FREELANCER": "FREELANCE", "RETIRED": "PENSION",
    "STUDENT": "OTHER", "UNEMPLOYED": "OTHER",
}
INCOME_SOURCE_LABELS = {
    "SALARIED": "Salary Income", "SELF_EMPLOYED": "Business Income",
    "BUSINESS_OWNER": "Business Income", "PROFESSIONAL": "Professional Practice Income",
    "FREELANCER": "Freelance Income", "RETIRED": "Pension Income",
    "STUDENT": "Guardian Income", "UNEMPLOYED": "Other Sources",
}
CATEGORY_LABELS = {
    "SALARIED": "Salaried Employee", "SELF_EMPLOYED": "Self Employed",
    "BUSINESS_OWNER": "Business Owner", "PROFESSIONAL": "Professional",
    "FREELANCER": "Freelancer", "RETIRED": "Retired / Pensioner",
    "STUDENT": "Student", "UNEMPLOYED": "Unemployed",
}

IFSC_PATTERN = r"^[A-Z]{4}0[A-Z0-9]{6}$"
PHONE_PATTERN = r"^[0-9]{10}$"
PINCODE_PATTERN = r"^[0-9]{6}$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
ACCOUNT_TYPES = ["SAVINGS", "CURRENT", "SALARY"]
