import pytest
from werkzeug.security import check_password_hash
from clinic_records.accounts import User, Doctor, Patient
from clinic_records.exceptions import InvalidRecordError


async def test_create_hashes_password():
    user = await User.create("Ann", "Lee", "ann@x.com", "s3cret")
    assert user.password != "s3cret"
    assert check_password_hash(user.password, "s3cret")
    assert user.verify_password("s3cret")
    assert not user.verify_password("wrong")


async def test_create_normalizes_fields():
    user = await User.create("  Ann ", "Lee", " Ann@X.com ", "pw")
    assert user.first_name == "Ann"
    assert user.email == "Ann@X.com"
    assert user.display_name == "Ann Lee"


async def test_role_factories_return_their_own_type():
    doctor = await Doctor.create("Ann", "Lee", "ann@x.com", "pw")
    patient = await Patient.create("Bo", "Chan", "bo@x.com", "pw")
    assert isinstance(doctor, Doctor) and doctor.role == "doctor"
    assert isinstance(patient, Patient) and patient.role == "patient"


@pytest.mark.parametrize("first_name, email, password, bad_field", [
    ("", "ann@x.com", "pw", "first_name"),
    ("Ann", "not-an-email", "pw", "email"),
    ("Ann", "ann@x.com", "", "password"),
    ("Ann", "ann@x.com", None, "password"),
])
async def test_create_rejects_invalid_input(first_name, email, password, bad_field):
    with pytest.raises(InvalidRecordError) as exc_info:
        await User.create(first_name, "Lee", email, password)
    assert exc_info.value.operation == "User.create"
    assert any(bad_field in err["loc"] for err in exc_info.value.errors)
