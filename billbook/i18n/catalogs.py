"""Message catalogs, one flat dict per locale."""

PL_PL: dict[str, str] = {
    "export.headers.date": "Data",
    "export.headers.billName": "Nazwa Rachunku",
    "export.headers.amount": "Kwota",

    "bills.currency": "zł",

    "months.january": "Styczeń",
    "months.february": "Luty",
    "months.march": "Marzec",
    "months.april": "Kwiecień",
    "months.may": "Maj",
    "months.june": "Czerwiec",
    "months.july": "Lipiec",
    "months.august": "Sierpień",
    "months.september": "Wrzesień",
    "months.october": "Październik",
    "months.november": "Listopad",
    "months.december": "Grudzień",

    "categories.electricity": "Prąd",
    "categories.water": "Woda",
    "categories.gas": "Gaz",
    "categories.internet": "Internet",
    "categories.trash": "Śmieci",
    "categories.heating": "Ogrzewanie",
    "categories.insurance": "Ubezpieczenie",
    "categories.other": "Inne",
    "categories.uncategorized": "Bez kategorii",

    "report.title": "Raport Rachunków",
    "report.generated": "Wygenerowano:",
    "report.billName": "Nazwa rachunku",
    "report.amount": "Kwota",
    "report.category": "Kategoria",
    "report.notes": "Uwagi",
    "report.noBills": "Brak rachunków",
    "report.paymentDate": "Data wpłaty:",
    "report.monthTotal": "Suma miesiąca:",
    "report.notesLabel": "Notatki:",
    "report.summary": "Podsumowanie",
    "report.month": "Miesiąc",
    "report.paymentDateHeader": "Data wpłaty",
    "report.billsCount": "Liczba rachunków",
    "report.total": "Suma",
    "report.totalLabel": "RAZEM",
    "report.averageLabel": "ŚREDNIA",
    "report.monthsCount": "{count} miesięcy",
    "report.page": "Strona {current} z {total}",
}

EN_GB: dict[str, str] = {
    "export.headers.date": "Date",
    "export.headers.billName": "Bill name",
    "export.headers.amount": "Amount",

    "bills.currency": "PLN",

    "months.january": "January",
    "months.february": "February",
    "months.march": "March",
    "months.april": "April",
    "months.may": "May",
    "months.june": "June",
    "months.july": "July",
    "months.august": "August",
    "months.september": "September",
    "months.october": "October",
    "months.november": "November",
    "months.december": "December",

    "categories.electricity": "Electricity",
    "categories.water": "Water",
    "categories.gas": "Gas",
    "categories.internet": "Internet",
    "categories.trash": "Waste collection",
    "categories.heating": "Heating",
    "categories.insurance": "Insurance",
    "categories.other": "Other",
    "categories.uncategorized": "Uncategorized",

    "report.title": "Bills Report",
    "report.generated": "Generated:",
    "report.billName": "Bill name",
    "report.amount": "Amount",
    "report.category": "Category",
    "report.notes": "Notes",
    "report.noBills": "No bills",
    "report.paymentDate": "Payment date:",
    "report.monthTotal": "Month total:",
    "report.notesLabel": "Notes:",
    "report.summary": "Summary",
    "report.month": "Month",
    "report.paymentDateHeader": "Payment date",
    "report.billsCount": "Bills",
    "report.total": "Total",
    "report.totalLabel": "TOTAL",
    "report.averageLabel": "AVERAGE",
    "report.monthsCount": "{count} months",
    "report.page": "Page {current} of {total}",
}

CATALOGS: dict[str, dict[str, str]] = {
    "pl-PL": PL_PL,
    "en-GB": EN_GB,
}

# strftime layouts for displayed dates; both read back through parse_date
DATE_FORMATS: dict[str, str] = {
    "pl-PL": "%d.%m.%Y",
    "en-GB": "%d/%m/%Y",
}

FALLBACK_LOCALE = "pl-PL"
