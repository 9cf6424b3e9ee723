"""Medical condition vocabulary."""

from enum import StrEnum


class MedicalCondition(StrEnum):
    """Conditions understood by the recommendation engine, in storage form."""

    DIABETES = "diabetes"
    HYPERTENSION = "hypertension"
    KIDNEY_STONE = "kidney_stone"
    HEART_DISEASE = "heart_disease"
    HIGH_CHOLESTEROL = "high_cholesterol"
    OBESITY = "obesity"
    GOUT = "gout"
    ACID_REFLUX = "acid_reflux"
    LIVER_DISEASE = "liver_disease"
    GALLBLADDER_DISEASE = "gallbladder_disease"


# Display-form conditions offered in the condition picker.
COMMON_CONDITIONS: tuple[str, ...] = (
    "Diabetes Type 1",
    "Diabetes Type 2",
    "Gestational Diabetes",
    "Hypertension",
    "High Blood Pressure",
    "Heart Disease",
    "Coronary Heart Disease",
    "High Cholesterol",
    "High LDL Cholesterol",
    "Digestive Issues",
    "Acid Reflux",
    "Irritable Bowel Syndrome",
    "Constipation",
    "Immune Support",
    "Low Immunity",
    "Frequent Infections",
    "Weight Management",
    "Obesity",
    "Underweight",
    "Anemia",
    "Iron Deficiency",
    "Vitamin B12 Deficiency",
    "Bone Health",
    "Osteoporosis",
    "Calcium Deficiency",
    "Arthritis",
    "Rheumatoid Arthritis",
    "Osteoarthritis",
    "Asthma",
    "Respiratory Issues",
    "Depression",
    "Anxiety",
    "Stress",
    "Insomnia",
    "Sleep Disorders",
    "Kidney Disease",
    "Chronic Kidney Disease",
    "Kidney Stones",
    "Liver Disease",
    "Fatty Liver",
    "Thyroid Issues",
    "Hypothyroidism",
    "Hyperthyroidism",
    "Migraine",
    "Chronic Headaches",
    "Skin Problems",
    "Eczema",
    "Psoriasis",
    "Acne",
    "Cancer",
    "Breast Cancer",
    "Prostate Cancer",
    "Colorectal Cancer",
    "Pregnancy",
    "Breastfeeding",
    "Menopause",
    "PCOS",
    "Endometriosis",
    "Gout",
    "High Uric Acid",
    "Memory Issues",
    "Cognitive Decline",
    "Alzheimer's Disease",
    "Eye Health",
    "Macular Degeneration",
    "Cataracts",
    "Glaucoma",
)
