import csv
import io
from datetime import date

from openpyxl import load_workbook

from app.models.alert import Alert
from app.models.department import Department

API = "/api/v1"


def filename_of(response):
    disposition = response.headers["content-disposition"]
    assert disposition.startswith("attachment;")
    return disposition.split('filename="', 1)[1].rstrip('"')


def test_inventory_csv(client, make_item, staff_headers):
    make_item("Laptop", Department.IT, quantity=3, serial_number="SN-1")
    make_item("Beaker", Department.CHEMISTRY, quantity=40)

    response = client.get(f"{API}/reports/inventory", headers=staff_headers, params={"department": "IT"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert filename_of(response) == f"inventory-report-IT-{date.today().isoformat()}.csv"
    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[0][:4] == ["Name", "Model", "Serial Number", "Quantity"]
    assert rows[1][0] == "Laptop"
    assert len(rows) == 2


def test_low_stock_report_includes_low_and_out_groups(client, make_item, staff_headers):
    make_item("Laptop", quantity=3)
    make_item("Monitor", quantity=0)
    make_item("Desk", quantity=30)

    response = client.get(f"{API}/reports/inventory", headers=staff_headers, params={"report_type": "low-stock"})

    names = {row[0] for row in list(csv.reader(io.StringIO(response.text)))[1:]}
    assert names == {"Laptop", "Monitor"}
    assert filename_of(response).startswith("low-stock-report-all-")


def test_inventory_xlsx(client, make_item, staff_headers):
    make_item("Laptop")

    response = client.get(f"{API}/reports/inventory", headers=staff_headers, params={"format": "xlsx"})

    assert filename_of(response).endswith(".xlsx")
    sheet = load_workbook(io.BytesIO(response.content)).active
    assert sheet["A1"].value == "Name"
    assert sheet["A2"].value == "Laptop"


def test_services_pdf(client, admin_headers):
    client.post(f"{API}/services/", headers=admin_headers, data={
        "department": "IT",
        "service_type": "internal",
        "nature_of_service": "calibration",
        "service_date": "2026-02-01",
        "technician_vendor_name": "Lab crew",
    })

    response = client.get(f"{API}/reports/services", headers=admin_headers, params={"format": "pdf"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")
    assert filename_of(response) == f"services-report-all-{date.today().isoformat()}.pdf"


def test_alerts_csv(client, db, staff_headers):
    db.add(Alert(alert_type="out_of_stock", message='Monitor "27in" is out', severity="high"))
    db.commit()

    response = client.get(f"{API}/reports/alerts", headers=staff_headers)

    assert filename_of(response) == f"alerts-report-{date.today().isoformat()}.csv"
    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[1][1] == 'Monitor "27in" is out'
    assert rows[1][3] == "N/A"
    assert rows[1][5] == "Pending"


def test_empty_report_is_not_found(client, staff_headers):
    response = client.get(f"{API}/reports/inventory", headers=staff_headers)

    assert response.status_code == 404


def test_unknown_format(client, make_item, staff_headers):
    make_item("Laptop")

    assert client.get(f"{API}/reports/inventory", headers=staff_headers,
                      params={"format": "docx"}).status_code == 422
