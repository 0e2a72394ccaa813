"""Guards run before deleting catalog and department rows."""
from facility.exceptions import ReferenceInUse
from facility.models import Department, Inventory, Medicine, PrescribedMedicine


def ensure_medicine_deletable(medicine: Medicine) -> None:
    prescriptions = PrescribedMedicine.objects.filter(medicine=medicine).count()
    if prescriptions:
        raise ReferenceInUse(
            'Cannot delete medicine that is currently prescribed',
            prescriptionsCount=prescriptions,
        )
    stock = Inventory.objects.filter(medicine=medicine).count()
    if stock:
        raise ReferenceInUse(
            'Cannot delete medicine that has inventory records',
            inventoryCount=stock,
        )


def ensure_department_deletable(department: Department) -> None:
    # Non-nurse staff must keep a department, so staff block the delete as well
    beds = department.beds.count()
    staff = department.staff.count()
    if beds or staff:
        raise ReferenceInUse(
            'Cannot delete department that still has beds or staff',
            bedsCount=beds,
            staffCount=staff,
        )
