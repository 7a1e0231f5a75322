"""Field catalogue for the Membership Signup tool.

Defines every field of the Coastal Grand Hotel membership application,
the ordered steps that group them, and the terms and conditions the
applicant must accept before submitting.

The catalogue is static configuration. ``Catalogue`` checks at
construction that steps and fields agree with each other, so a typo in a
step's field list fails at import time instead of silently hiding a field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class FieldKind(str, Enum):
    """The closed set of input kinds the wizard knows how to render."""

    TEXT = "text"
    TEXTAREA = "textarea"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SELECT = "select"
    MULTISELECT = "multiselect"
    DATE = "date"
    SIGNATURE = "signature"


CHOICE_KINDS = frozenset({FieldKind.RADIO, FieldKind.SELECT, FieldKind.MULTISELECT})
INPUT_SUBTYPES = ("text", "email", "password", "number", "link")


class CatalogueError(ValueError):
    """Raised when steps and field descriptors are out of sync."""


@dataclass(frozen=True)
class FieldOption:
    label: str
    value: str


@dataclass(frozen=True)
class FieldDescriptor:
    """A single field of the membership application."""

    name: str
    label: str
    kind: FieldKind
    required: bool = False
    options: tuple[FieldOption, ...] = ()
    input_subtype: str | None = None  # text fields only: email, number, link, ...
    placeholder: str = ""
    description: str = ""

    @property
    def is_multi_valued(self) -> bool:
        """True for fields whose value is a list of option values."""
        if self.kind == FieldKind.MULTISELECT:
            return True
        return self.kind == FieldKind.CHECKBOX and bool(self.options)

    @property
    def option_values(self) -> list[str]:
        return [o.value for o in self.options]

    def option_label(self, value: str) -> str:
        for o in self.options:
            if o.value == value:
                return o.label
        return value


@dataclass(frozen=True)
class Step:
    title: str
    description: str
    field_names: tuple[str, ...] = field(default_factory=tuple)


def check_catalogue(fields: list[FieldDescriptor], steps: list[Step]) -> list[str]:
    """Return a list of consistency problems between *fields* and *steps*.

    An empty list means the catalogue is usable.
    """
    problems: list[str] = []

    seen: set[str] = set()
    for f in fields:
        if f.name in seen:
            problems.append(f"Duplicate field name: {f.name}")
        seen.add(f.name)
        if f.kind in CHOICE_KINDS and not f.options:
            problems.append(f"Field {f.name} ({f.kind.value}) has no options")
        if f.input_subtype is not None and f.input_subtype not in INPUT_SUBTYPES:
            problems.append(f"Field {f.name} has unknown input subtype {f.input_subtype!r}")

    if not steps:
        problems.append("Catalogue has no steps")

    owners: dict[str, list[int]] = {}
    for idx, step in enumerate(steps):
        for name in step.field_names:
            if name not in seen:
                problems.append(f"Step {idx + 1} ({step.title}) references unknown field: {name}")
            owners.setdefault(name, []).append(idx)

    for f in fields:
        placed = owners.get(f.name, [])
        if not placed:
            problems.append(f"Field {f.name} is not placed on any step")
        elif len(placed) > 1:
            problems.append(f"Field {f.name} appears on more than one step")

    return problems


class Catalogue:
    """Ordered steps over a set of field descriptors."""

    def __init__(self, fields: list[FieldDescriptor], steps: list[Step]):
        problems = check_catalogue(fields, steps)
        if problems:
            raise CatalogueError("; ".join(problems))
        self.fields: dict[str, FieldDescriptor] = {f.name: f for f in fields}
        self.steps: tuple[Step, ...] = tuple(steps)

    def __contains__(self, name: str) -> bool:
        return name in self.fields

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def step_count(self) -> int:
        return len(self.steps)

    def field(self, name: str) -> FieldDescriptor:
        """Look up a field by name. Raises KeyError for unknown names."""
        try:
            return self.fields[name]
        except KeyError:
            raise KeyError(f"Unknown field: {name}") from None

    def step_fields(self, step_index: int) -> list[FieldDescriptor]:
        """Field descriptors shown on *step_index*, in display order."""
        if not 0 <= step_index < len(self.steps):
            raise IndexError(f"Step index out of range: {step_index}")
        return [self.fields[n] for n in self.steps[step_index].field_names]

    def fields_of_kind(self, kind: FieldKind) -> list[FieldDescriptor]:
        return [f for f in self.fields.values() if f.kind == kind]


# ---------------------------------------------------------------------------
# Coastal Grand Hotel membership application
# ---------------------------------------------------------------------------

def _opts(*pairs: tuple[str, str]) -> tuple[FieldOption, ...]:
    return tuple(FieldOption(label=label, value=value) for label, value in pairs)


_SALUTATIONS = _opts(("Mr.", "mr"), ("Mrs.", "mrs"), ("Ms.", "ms"), ("Dr.", "dr"))
_GENDERS = _opts(("Male", "male"), ("Female", "female"), ("Other", "other"))
_YES_NO = _opts(("Yes", "yes"), ("No", "no"))
_CARD_TYPES = _opts(
    ("Visa", "visa"),
    ("MasterCard", "mastercard"),
    ("American Express", "amex"),
    ("RuPay", "rupay"),
    ("Diners Club", "diners"),
)
_KYC_DOCUMENTS = _opts(
    ("Passport", "passport"),
    ("PAN Card", "pan_card"),
    ("Aadhaar Card", "aadhaar"),
    ("Driving Licence", "driving_licence"),
    ("Voter ID", "voter_id"),
)

MEMBERSHIP_TIERS = _opts(
    ("Bronze", "bronze"),
    ("Silver", "silver"),
    ("Gold", "gold"),
    ("Platinum", "platinum"),
    ("Diamond", "diamond"),
)


def _text(name: str, label: str, required: bool = False, subtype: str = "text",
          placeholder: str = "", description: str = "") -> FieldDescriptor:
    return FieldDescriptor(
        name=name, label=label, kind=FieldKind.TEXT, required=required,
        input_subtype=subtype, placeholder=placeholder, description=description,
    )


def _date(name: str, label: str, required: bool = False, description: str = "") -> FieldDescriptor:
    return FieldDescriptor(name=name, label=label, kind=FieldKind.DATE,
                           required=required, description=description)


def _choice(kind: FieldKind, name: str, label: str, options: tuple[FieldOption, ...],
            required: bool = False, placeholder: str = "", description: str = "") -> FieldDescriptor:
    return FieldDescriptor(name=name, label=label, kind=kind, required=required,
                           options=options, placeholder=placeholder, description=description)


_PERSONAL_FIELDS = [
    _choice(FieldKind.RADIO, "memberType", "Member Type", _opts(
        ("Individual", "individual"), ("Couple", "couple"),
        ("Family", "family"), ("Corporate", "corporate"),
    ), required=True),
    _choice(FieldKind.SELECT, "salutation", "Salutation", _SALUTATIONS, required=True,
            placeholder="Select"),
    _text("firstName", "First Name", required=True, placeholder="John"),
    _text("middleName", "Middle Name"),
    _text("lastName", "Last Name", required=True, placeholder="Doe"),
    _date("dateOfBirth", "Date of Birth", required=True,
          description="Required for age verification."),
    _choice(FieldKind.SELECT, "ageRange", "Age Range", _opts(
        ("18 - 25", "18-25"), ("26 - 35", "26-35"), ("36 - 45", "36-45"),
        ("46 - 55", "46-55"), ("56 and above", "56+"),
    ), required=True, placeholder="Select age range"),
    _choice(FieldKind.SELECT, "occupation", "Occupation", _opts(
        ("Salaried", "salaried"), ("Self Employed", "self_employed"),
        ("Business", "business"), ("Professional", "professional"),
        ("Retired", "retired"), ("Other", "other"),
    ), required=True, placeholder="Select occupation"),
    _text("profession", "Profession", required=True, placeholder="e.g. Chartered Accountant"),
    _text("firmName", "Firm / Company Name"),
    _text("designation", "Designation"),
    _choice(FieldKind.SELECT, "annualIncome", "Annual Income", _opts(
        ("Below 5 Lakhs", "below_5l"), ("5 - 10 Lakhs", "5l_10l"),
        ("10 - 25 Lakhs", "10l_25l"), ("25 - 50 Lakhs", "25l_50l"),
        ("Above 50 Lakhs", "above_50l"),
    ), required=True, placeholder="Select income range"),
    _choice(FieldKind.RADIO, "foodPreference", "Food Preference", _opts(
        ("Vegetarian", "veg"), ("Non-Vegetarian", "non_veg"),
        ("Vegan", "vegan"), ("Jain", "jain"),
    ), required=True),
    _choice(FieldKind.MULTISELECT, "cuisinePreference", "Cuisine Preference", _opts(
        ("Indian", "indian"), ("Continental", "continental"), ("Chinese", "chinese"),
        ("Italian", "italian"), ("Thai", "thai"), ("Mexican", "mexican"),
    ), placeholder="Select cuisines",
        description="Helps us tailor your dining experience."),
    _text("holidayDestination", "Favourite Holiday Destination"),
    _text("facebookId", "Facebook ID", subtype="link", placeholder="https://facebook.com/you"),
    _text("twitterId", "Twitter ID"),
    _choice(FieldKind.RADIO, "hasOwnCar", "Do you own a car?", _YES_NO),
]

_CO_APPLICANT_FIELDS = [
    _choice(FieldKind.SELECT, "coApplicantSalutation", "Salutation", _SALUTATIONS,
            placeholder="Select"),
    _text("coApplicantFirstName", "First Name"),
    _text("coApplicantMiddleName", "Middle Name"),
    _text("coApplicantLastName", "Last Name"),
    _choice(FieldKind.SELECT, "coApplicantRelationship", "Relationship", _opts(
        ("Spouse", "spouse"), ("Parent", "parent"), ("Sibling", "sibling"),
        ("Child", "child"), ("Business Partner", "partner"), ("Other", "other"),
    ), placeholder="Select relationship"),
    _date("coApplicantDateOfBirth", "Date of Birth"),
    _text("coApplicantStdCode", "STD Code"),
    _text("coApplicantPhone", "Phone"),
    _text("coApplicantFax", "Fax"),
    _text("coApplicantMobile", "Mobile"),
    _text("coApplicantEmail", "Email", subtype="email"),
]

_FAMILY_CONTACT_FIELDS = [
    _choice(FieldKind.SELECT, "spouseSalutation", "Spouse Salutation", _SALUTATIONS,
            placeholder="Select"),
    _text("spouseName", "Spouse Name"),
    _date("spouseDateOfBirth", "Spouse Date of Birth"),
    _date("weddingAnniversary", "Wedding Anniversary"),
    _choice(FieldKind.SELECT, "numberOfChildren", "Number of Children", _opts(
        ("None", "0"), ("One", "1"), ("Two", "2"), ("Three", "3"),
    ), placeholder="Select"),
    _text("child1Name", "Child 1 Name"),
    _choice(FieldKind.SELECT, "child1Gender", "Child 1 Gender", _GENDERS),
    _date("child1DateOfBirth", "Child 1 Date of Birth"),
    _text("child2Name", "Child 2 Name"),
    _choice(FieldKind.SELECT, "child2Gender", "Child 2 Gender", _GENDERS),
    _date("child2DateOfBirth", "Child 2 Date of Birth"),
    _text("child3Name", "Child 3 Name"),
    _choice(FieldKind.SELECT, "child3Gender", "Child 3 Gender", _GENDERS),
    _date("child3DateOfBirth", "Child 3 Date of Birth"),
    _text("spouseMobile", "Spouse Mobile"),
    _text("spouseEmail", "Spouse Email", subtype="email"),
    _text("premisesName", "Flat / House No. / Premises", required=True),
    _text("roadStreetLane", "Road / Street / Lane", required=True),
    _text("areaLocality", "Area / Locality", required=True),
    _text("landmark", "Landmark"),
    _text("city", "City", required=True),
    _text("state", "State", required=True),
    _text("country", "Country", required=True, placeholder="India"),
    _text("postalCode", "Postal Code", required=True),
    _text("contactStdCode", "STD Code"),
    _text("contactPhone", "Phone"),
    _text("contactFax", "Fax"),
    _text("contactMobile", "Mobile", required=True, placeholder="+91 98765 43210"),
    _text("contactEmail", "Email Address", required=True, subtype="email",
          placeholder="john.doe@example.com",
          description="We'll send your membership details to this email."),
]

_COMMUNICATION_FIELDS = [
    _choice(FieldKind.CHECKBOX, "preferredContactMethod", "Preferred Contact Method", _opts(
        ("Phone", "phone"), ("Email", "email"), ("SMS", "sms"),
        ("WhatsApp", "whatsapp"), ("Post", "post"),
    ), required=True),
    _choice(FieldKind.RADIO, "mailingAddress", "Mailing Address", _opts(
        ("Residence", "residence"), ("Office", "office"),
    ), required=True),
    _choice(FieldKind.CHECKBOX, "communicationMode", "Communication Mode", _opts(
        ("Newsletter", "newsletter"), ("Offers & Promotions", "offers"),
        ("Event Invitations", "events"),
    ), required=True),
]

_PRODUCT_FIELDS = [
    _choice(FieldKind.SELECT, "membershipCategory", "Membership Category", MEMBERSHIP_TIERS,
            required=True, placeholder="Select a tier",
            description="Choose your desired membership level."),
    _choice(FieldKind.SELECT, "membershipYears", "Number of Years", _opts(
        ("1 Year", "1"), ("3 Years", "3"), ("5 Years", "5"),
        ("10 Years", "10"), ("25 Years", "25"),
    ), required=True, placeholder="Select duration"),
    FieldDescriptor(name="specialRequests", label="Special Requests / Notes",
                    kind=FieldKind.TEXTAREA,
                    placeholder="e.g. dietary restrictions, accessibility needs",
                    description="Any specific requirements or notes for your membership."),
]

_PAYMENT_FIELDS = [
    _text("membershipPrice", "Membership Price (INR)", required=True, subtype="number"),
    _text("downPaymentAmount", "Down Payment Amount (INR)", required=True, subtype="number"),
    _choice(FieldKind.RADIO, "downPaymentOption", "Down Payment Option", _opts(
        ("Full Payment", "full"), ("Partial Payment", "partial"),
    ), required=True),
    _choice(FieldKind.SELECT, "paymentMode", "Payment Mode", _opts(
        ("Cash", "cash"), ("Demand Draft", "demand_draft"),
        ("Cheque", "cheque"), ("Credit Card", "credit_card"),
    ), required=True, placeholder="Select payment mode"),
    _date("cashPaymentDate", "Cash Payment Date"),
    _text("cashPaymentAmount", "Cash Amount", subtype="number"),
    _text("cashReceiptNo", "Receipt No."),
    _text("ddBankName", "DD / Cheque Bank Name"),
    _text("ddInsuranceNo", "DD / Cheque No."),
    _date("ddDate", "DD / Cheque Date"),
    _text("creditCardNo", "Credit Card No.", subtype="number"),
    _date("creditCardExpiry", "Card Expiry"),
    _text("creditCardAuthNo", "Authorisation No."),
    _choice(FieldKind.CHECKBOX, "creditCardType", "Card Type", _CARD_TYPES),
    _choice(FieldKind.CHECKBOX, "creditCardCategory", "Card Category", _opts(
        ("Classic", "classic"), ("Gold", "gold"),
        ("Platinum", "platinum"), ("Signature", "signature"),
    )),
    _text("issuingBankName", "Issuing Bank"),
]

_EMI_FIELDS = [
    _choice(FieldKind.SELECT, "emiOptedPercentage", "EMI Opted (%)", _opts(
        ("25%", "25"), ("50%", "50"), ("75%", "75"), ("90%", "90"),
    ), placeholder="Select"),
    _choice(FieldKind.SELECT, "emiPaymentMode", "EMI Payment Mode", _opts(
        ("ECS", "ecs"), ("Credit Card", "credit_card"),
        ("Post-dated Cheques", "pdc"),
    ), placeholder="Select"),
    FieldDescriptor(name="emiThirdPartyPayment", label="Payment by a third party",
                    kind=FieldKind.CHECKBOX),
    _text("emiBankName", "Bank Name"),
    _text("emiInstrumentNo", "Instrument No."),
    _date("emiDate", "Instrument Date"),
    _text("emiCreditCardNo", "Credit Card No.", subtype="number"),
    _date("emiCreditCardExpiry", "Card Expiry"),
    _text("emiCreditCardAuthNo", "Authorisation No."),
    _choice(FieldKind.CHECKBOX, "emiCreditCardType", "Card Type", _CARD_TYPES),
    _text("ecsBank", "ECS Bank"),
    _date("ecsDate", "ECS Start Date"),
    _text("ecsMicrNo", "MICR No."),
    _text("ecsSampleInstrumentNo", "Sample Cheque No."),
]

_KYC_FIELDS = [
    _choice(FieldKind.CHECKBOX, "kycDocumentType", "Member KYC Documents", _KYC_DOCUMENTS,
            required=True),
    _choice(FieldKind.CHECKBOX, "coApplicantKycDocumentType", "Co-Applicant KYC Documents",
            _KYC_DOCUMENTS),
    _text("executiveName", "Executive Name"),
    _text("executiveCmeId", "Executive CME ID"),
    _date("executiveDate", "Date"),
]

_SIGNATURE_FIELDS = [
    FieldDescriptor(name="memberSignature", label="Member Signature",
                    kind=FieldKind.SIGNATURE, required=True,
                    description="Please provide your digital signature."),
    FieldDescriptor(name="coApplicantSignature", label="Co-Applicant Signature",
                    kind=FieldKind.SIGNATURE),
]


def _step(title: str, description: str, fields: list[FieldDescriptor]) -> Step:
    return Step(title=title, description=description,
                field_names=tuple(f.name for f in fields))


MEMBERSHIP_FIELDS: list[FieldDescriptor] = (
    _PERSONAL_FIELDS + _CO_APPLICANT_FIELDS + _FAMILY_CONTACT_FIELDS
    + _COMMUNICATION_FIELDS + _PRODUCT_FIELDS + _PAYMENT_FIELDS
    + _EMI_FIELDS + _KYC_FIELDS + _SIGNATURE_FIELDS
)

MEMBERSHIP_STEPS: list[Step] = [
    _step("Personal Information", "Basic member details and preferences", _PERSONAL_FIELDS),
    _step("Co-Applicant Details", "Co-applicant information (if applicable)", _CO_APPLICANT_FIELDS),
    _step("Family & Contact Details", "Spouse, family and address information",
          _FAMILY_CONTACT_FIELDS),
    _step("Communication Preferences", "How you prefer to be contacted", _COMMUNICATION_FIELDS),
    _step("Membership & Product Details", "Choose your membership category and duration",
          _PRODUCT_FIELDS),
    _step("Payment Information", "Payment details and options", _PAYMENT_FIELDS),
    _step("EMI Plan", "EMI options and payment setup (if applicable)", _EMI_FIELDS),
    _step("KYC Documents", "Document verification and executive details", _KYC_FIELDS),
    _step("Signatures & Declaration", "Digital signatures and final confirmation",
          _SIGNATURE_FIELDS),
]

MEMBERSHIP_CATALOGUE = Catalogue(MEMBERSHIP_FIELDS, MEMBERSHIP_STEPS)


# ---------------------------------------------------------------------------
# Terms and conditions
# ---------------------------------------------------------------------------

TERMS_INTRO = (
    "Welcome to the Coastal Grand Hotel Membership Program! By becoming a member, "
    "you agree to the following terms and conditions. Please read them carefully."
)

TERMS_AND_CONDITIONS: list[tuple[str, str]] = [
    ("Membership Eligibility",
     "Membership is open to individuals aged 18 years or older. The Coastal Grand Hotel "
     "reserves the right to refuse or revoke membership at its sole discretion."),
    ("Membership Benefits",
     "Membership benefits are subject to change without prior notice. Benefits may include "
     "discounted room rates, exclusive access to hotel facilities, special offers, and "
     "loyalty points. Specific benefits depend on your chosen membership tier."),
    ("Membership Tiers",
     "Bronze: basic discounts and newsletter access. Silver: enhanced discounts, early "
     "check-in and late check-out (subject to availability). Gold: premium discounts, "
     "complimentary breakfast, room upgrades (subject to availability). Platinum and "
     "Diamond: VIP treatment, dedicated concierge, executive lounge access, complimentary "
     "airport transfers."),
    ("Data Privacy",
     "All personal information collected will be used in accordance with our Privacy "
     "Policy. By signing up, you consent to the collection and use of your data as "
     "described therein."),
    ("Membership Fees",
     "Some membership tiers may require an annual fee. Fees are non-refundable unless "
     "otherwise stated."),
    ("Cancellation",
     "You may cancel your membership at any time by contacting our membership services. "
     "No refunds will be issued for partial membership periods."),
    ("Changes to Terms",
     "The hotel reserves the right to modify these terms at any time. Members will be "
     "notified of significant changes via email or through our website."),
    ("Limitation of Liability",
     "The hotel shall not be liable for any loss, damage, or injury arising from your "
     "participation in the membership program, except where prohibited by law."),
    ("Governing Law",
     "These terms shall be governed by the laws of the jurisdiction where the hotel is "
     "located."),
    ("Contact",
     "For any questions regarding your membership or these terms, please contact our "
     "membership services department."),
]
