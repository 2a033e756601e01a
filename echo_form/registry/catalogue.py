"""Built-in echocardiography report catalogue.

Fields are declared in report order. Declaration order is significant:
validation checks fields in this order and the printable report lists
sections in this order.
"""

from echo_form.registry.models import FieldDefinition, Scalar
from echo_form.registry.schema import FieldSchema

# Section headings
PATIENT_INFO_HEADING = "Patient Information"
LV_DIMENSIONS_HEADING = "LV Dimensions and Systolic Assessment"
DIASTOLIC_HEADING = "LV Diastolic Function Assessment"
CHAMBER_HEADING = "Chamber Dimensions and Function"
MITRAL_HEADING = "Mitral Valve Assessment"
AORTIC_HEADING = "Aortic Valve Assessment"
TRICUSPID_HEADING = "Tricuspid Valve Assessment"
PULMONARY_HEADING = "Pulmonary Valve Assessment"
SEPTAL_HEADING = "Septal Assessment"
SUMMARY_HEADING = "Report Summary and Recommendations"

# Field names referenced outside the catalogue
NAME_FIELD = "Name"
ID_FIELD = "ID"
DOB_FIELD = "DOB"
AGE_FIELD = "Age"
INDICATION_FIELD = "Indication"
INTERVENTION_DATE_FIELD = "Date of Intervention"
PRE_OP_FIELD = "Pre-Op Specify"
SYSTOLIC_COMMENT_FIELD = "Systolic Comment"
DIASTOLIC_COMMENT_FIELD = "Diastolic Comment"
CONCLUSION_FIELD = "Conclusion"
MITRAL_SCORE_FIELDS = (
    "Score Thickening",
    "Score Calcification",
    "Score Sub valvular",
    "Score Pliability",
)
MITRAL_SCORE_TOTAL_FIELD = "Score Total"

# Controlling values
INTERVENTION_OPTION_VALUE = "Post cardiac intervention (CABG, ASD D/C, PTMC)"
PRE_OP_OPTION_VALUE = "Pre operative assessment"

EFFUSION_OPTIONS = (
    "Thin rim of pericardial effusion",
    "Mild pericardial effusion",
    "Moderate pericardial effusion",
    "Cardiac tamponade",
)
VEGETATION_OPTIONS = (
    "None",
    "Attached to anterior leaflet",
    "Vegetation attached to posterior leaflet",
)
GRADE_OPTIONS = ("No", "Mild", "Moderate", "Severe")

MR_PRESENT = ("Trivial", "Mild", "Moderate", "Severe")
MS_PRESENT = ("Mild", "Moderate", "Tight")
GRADED_PRESENT = ("Mild", "Moderate", "Severe")
TR_PRESENT = ("Mild", "Moderate", "Severe", "Massive", "Torrential")


def _text(name: str, section: str, label: str | None = None, **kwargs) -> FieldDefinition:
    return FieldDefinition(
        name=name, label=label or name, input_kind="short_text", section=section, **kwargs
    )


def _number(name: str, section: str, label: str | None = None, **kwargs) -> FieldDefinition:
    return FieldDefinition(
        name=name, label=label or name, input_kind="numeric", section=section, **kwargs
    )


def _date(name: str, section: str, label: str | None = None, **kwargs) -> FieldDefinition:
    return FieldDefinition(
        name=name, label=label or name, input_kind="date", section=section, **kwargs
    )


def _choice(
    name: str,
    section: str,
    options: tuple[str, ...],
    label: str | None = None,
    **kwargs,
) -> FieldDefinition:
    return FieldDefinition(
        name=name,
        label=label or name,
        input_kind="single_choice",
        section=section,
        choice_options=options,
        **kwargs,
    )


def _when(controlling_field: str, *values: Scalar) -> dict:
    """Keyword arguments for a field conditional on a controlling value."""
    return {
        "is_conditional": True,
        "controlling_field": controlling_field,
        "activation_values": values,
    }


ECHO_FIELDS: tuple[FieldDefinition, ...] = (
    # Patient Information
    _text(NAME_FIELD, PATIENT_INFO_HEADING, "Patient Name", is_required=True,
          placeholder="Enter full name"),
    _text(ID_FIELD, PATIENT_INFO_HEADING, "Clinic ID", is_required=True,
          placeholder="Enter clinic ID or number"),
    _date(DOB_FIELD, PATIENT_INFO_HEADING, "Date of Birth", is_required=True),
    _number(AGE_FIELD, PATIENT_INFO_HEADING, is_computed=True, tooltip="Autofilled from DOB."),
    _choice(
        INDICATION_FIELD,
        PATIENT_INFO_HEADING,
        (
            "Assessment of cardiac function for ischaemic heart disease",
            "Assessment of valvular heart disease",
            INTERVENTION_OPTION_VALUE,
            PRE_OP_OPTION_VALUE,
        ),
    ),
    _date(INTERVENTION_DATE_FIELD, PATIENT_INFO_HEADING, is_required=True,
          **_when(INDICATION_FIELD, INTERVENTION_OPTION_VALUE)),
    _text(PRE_OP_FIELD, PATIENT_INFO_HEADING, is_required=True,
          placeholder="Specify pre-operative assessment details",
          **_when(INDICATION_FIELD, PRE_OP_OPTION_VALUE)),

    # LV Dimensions and Systolic Assessment
    _number("LV EDD", LV_DIMENSIONS_HEADING, is_required=True, suffix="mm"),
    _number("LV ESD", LV_DIMENSIONS_HEADING, suffix="mm"),
    _number("IVSd", LV_DIMENSIONS_HEADING, suffix="mm"),
    _number("pwD", LV_DIMENSIONS_HEADING, "LVPWd", suffix="mm"),
    _number("EF", LV_DIMENSIONS_HEADING, suffix="%"),
    _choice("RWMA", LV_DIMENSIONS_HEADING,
            ("None", "Anterior", "Septal", "Lateral", "Apical", "Inferior", "Posterior", "Basal")),
    _choice("LV cavity", LV_DIMENSIONS_HEADING,
            ("Normal size", "Dilated", "Concentric LVH",
             "Asymmetric septal/apical hypertrophy", "Other")),
    _choice(SYSTOLIC_COMMENT_FIELD, LV_DIMENSIONS_HEADING,
            ("Good LV systolic function", "Mildly reduced LV systolic function",
             "Moderately reduced LV systolic function", "Severely reduced LV systolic function"),
            label="LV Systolic Function Comment"),

    # LV Diastolic Function Assessment
    _number("E", DIASTOLIC_HEADING, suffix="cm/s"),
    _number("A", DIASTOLIC_HEADING, suffix="cm/s"),
    _number("E/A ratio", DIASTOLIC_HEADING),
    _number("Medial wall e'", DIASTOLIC_HEADING, suffix="cm/s"),
    _number("E/e'", DIASTOLIC_HEADING),
    _choice(DIASTOLIC_COMMENT_FIELD, DIASTOLIC_HEADING,
            ("No diastolic dysfunction", "Grade 1 diastolic dysfunction",
             "Grade 2 diastolic dysfunction", "Grade 3 diastolic dysfunction"),
            label="LV Diastolic Function Comment"),

    # Chamber Dimensions and Function
    _choice("LA", CHAMBER_HEADING, ("Normal", "Dilated", "Giant")),
    _number("LA diameter", CHAMBER_HEADING, suffix="cm"),
    _text("LA Comments", CHAMBER_HEADING, placeholder="Any specific LA findings"),
    _choice("RA", CHAMBER_HEADING, ("Normal", "Dilated")),
    _number("RA diameter", CHAMBER_HEADING, suffix="cm"),
    _text("RA Comments", CHAMBER_HEADING, placeholder="Any specific RA findings"),
    _choice("RV", CHAMBER_HEADING, ("Normal", "Dilated", "RV hypertrophy")),
    _text("RV Comments", CHAMBER_HEADING, placeholder="Any specific RV findings"),
    _number("TAPSE", CHAMBER_HEADING, suffix="cm",
            tooltip="Tricuspid Annular Plane Systolic Excursion"),

    # Mitral Valve Assessment
    _choice("Mitral valve", MITRAL_HEADING,
            ("Normal", "Thickened", "Myxomatous", "Rheumatic", "Prolapse", "Prosthetic")),
    _choice("MV Vegatations", MITRAL_HEADING, VEGETATION_OPTIONS, label="Vegatations"),
    _text("MV Comment on vegetation", MITRAL_HEADING, "Comment on vegetation",
          placeholder="Detailed description of vegetation"),
    _choice("Mitral Regurgitation", MITRAL_HEADING, ("No",) + MR_PRESENT),
    _number("VC", MITRAL_HEADING, suffix="cm", **_when("Mitral Regurgitation", *MR_PRESENT)),
    _number("EROA (PISA)", MITRAL_HEADING, suffix="cm²",
            **_when("Mitral Regurgitation", *MR_PRESENT)),
    _text("Mitral regurgitation assessment", MITRAL_HEADING,
          placeholder="Overall assessment/qualifiers",
          **_when("Mitral Regurgitation", *MR_PRESENT)),
    _choice("Mitral stenosis", MITRAL_HEADING, ("No",) + MS_PRESENT),
    _number("Mitral valve area (Trace)", MITRAL_HEADING, suffix="cm²",
            **_when("Mitral stenosis", *MS_PRESENT)),
    _number("Mitral valve area (Doppler)", MITRAL_HEADING, suffix="cm²",
            **_when("Mitral stenosis", *MS_PRESENT)),
    _number("Mitral valve Max PG", MITRAL_HEADING, suffix="mmHg",
            **_when("Mitral stenosis", *MS_PRESENT)),
    _number("Mitral Valve Mean PG", MITRAL_HEADING, suffix="mmHg",
            **_when("Mitral stenosis", *MS_PRESENT)),
    _number("Score Thickening", MITRAL_HEADING, "Thickening",
            **_when("Mitral stenosis", *MS_PRESENT)),
    _number("Score Calcification", MITRAL_HEADING, "Calcification",
            **_when("Mitral stenosis", *MS_PRESENT)),
    _number("Score Sub valvular", MITRAL_HEADING, "Sub valvular",
            **_when("Mitral stenosis", *MS_PRESENT)),
    _number("Score Pliability", MITRAL_HEADING, "Pliability",
            **_when("Mitral stenosis", *MS_PRESENT)),
    _number(MITRAL_SCORE_TOTAL_FIELD, MITRAL_HEADING, "Total Score", is_computed=True,
            tooltip="Autofilled total score", **_when("Mitral stenosis", *MS_PRESENT)),
    _text("Special comments on mitral valve", MITRAL_HEADING,
          placeholder="Any specific comments on the Mitral Valve",
          **_when("Mitral stenosis", *MS_PRESENT)),

    # Aortic Valve Assessment
    _choice("Aortic valve", AORTIC_HEADING,
            ("Normal", "Sclerosed", "Calcified", "Tricuspid", "Bicuspid")),
    _choice("AV Vegatations", AORTIC_HEADING, VEGETATION_OPTIONS, label="Vegatations"),
    _text("AV Comment on vegetation", AORTIC_HEADING, "Comment on vegetation",
          placeholder="Detailed description of AV vegetation"),
    _number("Aortic annulus", AORTIC_HEADING, suffix="cm"),
    _number("Aortic sinuses", AORTIC_HEADING, suffix="cm"),
    _number("Sino - tubular junction", AORTIC_HEADING, suffix="cm"),
    _number("Ascending aorta", AORTIC_HEADING, suffix="cm"),
    _choice("Aortic regurgitation", AORTIC_HEADING, GRADE_OPTIONS),
    _number("AI P1/2", AORTIC_HEADING, suffix="m/s",
            **_when("Aortic regurgitation", *GRADED_PRESENT)),
    _number("LVOT diamater", AORTIC_HEADING, suffix="mm",
            **_when("Aortic regurgitation", *GRADED_PRESENT)),
    _number("Regurgitant jet width", AORTIC_HEADING, suffix="mm",
            **_when("Aortic regurgitation", *GRADED_PRESENT)),
    _number("Jet width/ LOVT diameter", AORTIC_HEADING,
            **_when("Aortic regurgitation", *GRADED_PRESENT)),
    _choice("Diastolic flow reversal in decending aorta", AORTIC_HEADING, ("Present", "Absent"),
            **_when("Aortic regurgitation", *GRADED_PRESENT)),
    _choice("Aortic stenosis", AORTIC_HEADING, GRADE_OPTIONS),
    _number("Aortic valve maximum pressure gradient", AORTIC_HEADING, suffix="mmHg",
            **_when("Aortic stenosis", *GRADED_PRESENT)),
    _number("Aortic valve mean pressure gradient", AORTIC_HEADING, suffix="mmHg",
            **_when("Aortic stenosis", *GRADED_PRESENT)),
    _number("Aortic valve VTI", AORTIC_HEADING, suffix="cm",
            **_when("Aortic stenosis", *GRADED_PRESENT)),
    _number("LVOT VTI", AORTIC_HEADING, suffix="cm",
            **_when("Aortic stenosis", *GRADED_PRESENT)),
    _number("LVOT Diameter", AORTIC_HEADING, suffix="cm",
            **_when("Aortic stenosis", *GRADED_PRESENT)),
    _number("AVA", AORTIC_HEADING, suffix="cm²",
            **_when("Aortic stenosis", *GRADED_PRESENT)),

    # Tricuspid Valve Assessment
    _choice("Tricuspid valve", TRICUSPID_HEADING, ("Normal",)),
    _choice("TV Vegatations", TRICUSPID_HEADING, VEGETATION_OPTIONS, label="Vegatations"),
    _text("TV Comment on vegetation", TRICUSPID_HEADING, "Comment on vegetation",
          placeholder="Detailed description of TV vegetation"),
    _choice("Tricuspid regurgitation", TRICUSPID_HEADING, ("None",) + TR_PRESENT),
    _number("TRPG", TRICUSPID_HEADING, suffix="mmHg",
            **_when("Tricuspid regurgitation", *TR_PRESENT)),
    _number("VC diameter", TRICUSPID_HEADING, suffix="mm",
            **_when("Tricuspid regurgitation", *TR_PRESENT)),
    _number("EROA (pisa)", TRICUSPID_HEADING, suffix="mm²",
            **_when("Tricuspid regurgitation", *TR_PRESENT)),
    _choice("Hepatic vein flow", TRICUSPID_HEADING,
            ("Dominant", "Blunt", "Systolic flow reversal"),
            **_when("Tricuspid regurgitation", *TR_PRESENT)),
    _choice("Tricuspid stenosis", TRICUSPID_HEADING, GRADE_OPTIONS),
    _text("TV Comments", TRICUSPID_HEADING, placeholder="Any specific TV findings"),

    # Pulmonary Valve Assessment
    _choice("Pulmonary valve", PULMONARY_HEADING, ("Normal",)),
    _choice("PV Vegatations", PULMONARY_HEADING, VEGETATION_OPTIONS, label="Vegatations"),
    _text("PV Comment on vegetation", PULMONARY_HEADING, "Comment on vegetation",
          placeholder="Detailed description of PV vegetation"),
    _choice("Pulmonary stenosis", PULMONARY_HEADING, GRADE_OPTIONS),
    _number("Pulmonary valve maximum pressure gradients", PULMONARY_HEADING,
            "Pulomonary valve maximum pressure gradients", suffix="mmHg",
            **_when("Pulmonary stenosis", *GRADED_PRESENT)),
    _number("Pulmonary valve mean pressure gradient", PULMONARY_HEADING, suffix="mmHg",
            **_when("Pulmonary stenosis", *GRADED_PRESENT)),
    _number("Peak velocity", PULMONARY_HEADING, suffix="cm/s",
            **_when("Pulmonary stenosis", *GRADED_PRESENT)),
    _choice("Pulmonary regurgitation", PULMONARY_HEADING, GRADE_OPTIONS),
    _text("PV Comments", PULMONARY_HEADING, placeholder="Any specific PV findings"),

    # Septal Assessment
    _choice("Intra atrial septum", SEPTAL_HEADING,
            ("Intact", "Echo drop out with no colour crossing", "Colour crossing",
             "Atrial septal defect", "Bulding to right side", "D shaped")),
    _text("IAS Special Comments", SEPTAL_HEADING, "Special comments",
          placeholder="Specify findings on Interatrial Septum"),
    _choice("Intra ventricular septum", SEPTAL_HEADING,
            ("Intact", "Peri membranous VSD", "Muscual VSD")),
    _text("IVS Special Comments", SEPTAL_HEADING, "Special comments",
          placeholder="Specify findings on Interventricular Septum"),

    # Report Summary and Recommendations
    _choice("Pericardium", SUMMARY_HEADING, ("No effusion",) + EFFUSION_OPTIONS),
    _number("Effusion Measurement Anterior", SUMMARY_HEADING, "Effusion Measurement (Anterior)",
            suffix="mm", tooltip="Measured depth in millimeters",
            **_when("Pericardium", *EFFUSION_OPTIONS)),
    _number("Effusion Measurement Inferior", SUMMARY_HEADING, "Effusion Measurement (Inferior)",
            suffix="mm", tooltip="Measured depth in millimeters",
            **_when("Pericardium", *EFFUSION_OPTIONS)),
    _number("Effusion Measurement Medial", SUMMARY_HEADING, "Effusion Measurement (Medial)",
            suffix="mm", tooltip="Measured depth in millimeters",
            **_when("Pericardium", *EFFUSION_OPTIONS)),
    _number("Effusion Measurement Lateral", SUMMARY_HEADING, "Effusion Measurement (Lateral)",
            suffix="mm", tooltip="Measured depth in millimeters",
            **_when("Pericardium", *EFFUSION_OPTIONS)),
    _number("Effusion Measurement Apical", SUMMARY_HEADING, "Effusion Measurement (Apical)",
            suffix="mm", tooltip="Measured depth in millimeters",
            **_when("Pericardium", *EFFUSION_OPTIONS)),
    _text("LV systolic function summary", SUMMARY_HEADING,
          placeholder="LV systolic function summary"),
    _text("LV diastolic function summary", SUMMARY_HEADING,
          placeholder="LV diastolic function summary"),
    _text("Valves summary", SUMMARY_HEADING, placeholder="Valves summary"),
    _text(CONCLUSION_FIELD, SUMMARY_HEADING, placeholder="Overall final summary"),
    _choice("Recommendation", SUMMARY_HEADING,
            ("Follow up Echo in 1 year", "Follow up Echo in 2 years",
             "Follow up Echo in 6 months", "For cardiac intervention")),
)


def default_schema() -> FieldSchema:
    """Build the echocardiography report schema."""
    return FieldSchema(ECHO_FIELDS)
