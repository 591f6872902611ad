"""Tabular and Excel export of the P&L and debt schedule."""

from io import BytesIO

import pandas as pd


def pl_to_dataframe(rows, value='total'):
    """P&L rows as a DataFrame: one line per row, one column per year."""
    records = []
    for row in rows:
        record = {'id': row.id, 'Line': row.label, 'Group': row.group, 'Kind': row.kind}
        for cell in row.years:
            record[f'Y{cell.year}'] = getattr(cell, value)
        records.append(record)
    return pd.DataFrame(records)


def debt_schedule_to_dataframe(schedule):
    """Monthly schedule rows plus a Year column."""
    df = pd.DataFrame(schedule.rows, columns=['month', 'payment', 'interest', 'principal', 'balance'])
    df.insert(0, 'year', (df['month'] - 1) // 12 + 1)
    return df


def debt_schedule_by_year(schedule):
    """Annual payment/interest/principal sums and year-end balance."""
    df = debt_schedule_to_dataframe(schedule)
    if df.empty:
        return pd.DataFrame(columns=['year', 'payment', 'interest', 'principal', 'balance'])
    annual = df.groupby('year').agg(
        payment=('payment', 'sum'),
        interest=('interest', 'sum'),
        principal=('principal', 'sum'),
        balance=('balance', 'last'),
    )
    return annual.reset_index()


def create_pl_workbook(rows, schedule=None, deal_name='Hotel'):
    """Write the P&L (and optionally the annual debt schedule) to xlsx bytes.

    Args:
        rows: P&L rows from calculate_pl
        schedule: Optional DebtScheduleResult
        deal_name: Title for the P&L sheet
    """
    df = pl_to_dataframe(rows)
    year_cols = [c for c in df.columns if c.startswith('Y')]

    bio = BytesIO()
    with pd.ExcelWriter(bio, engine="xlsxwriter") as writer:
        # Title in row 1, headers in row 3, data from row 4
        df[['Line'] + year_cols].to_excel(writer, sheet_name="Profit & Loss", index=False, startrow=2)

        workbook = writer.book
        worksheet = writer.sheets["Profit & Loss"]

        title_format = workbook.add_format({
            'bold': True,
            'font_size': 16,
        })
        section_format = workbook.add_format({
            'bold': True,
            'bg_color': '#F0F0F0'
        })
        label_format = workbook.add_format({
            'indent': 1
        })
        total_label_format = workbook.add_format({
            'bold': True,
            'top': 1
        })
        currency_format = workbook.add_format({
            'num_format': '#,##0;(#,##0)',
            'align': 'right'
        })
        total_currency_format = workbook.add_format({
            'bold': True,
            'num_format': '#,##0;(#,##0)',
            'align': 'right',
            'top': 1
        })
        kpi_format = workbook.add_format({
            'num_format': '#,##0.00',
            'align': 'right'
        })

        worksheet.write(0, 0, f"{deal_name} - Profit & Loss", title_format)
        worksheet.set_column(0, 0, 36)
        worksheet.set_column(1, len(year_cols), 14)

        for i, row in enumerate(rows):
            xl_row = i + 3
            is_total = row.kind in ('subtotal', 'total')
            worksheet.write(xl_row, 0, row.label, total_label_format if is_total else label_format)
            for j, cell in enumerate(row.years):
                if row.kind == 'kpi':
                    fmt = kpi_format
                elif is_total:
                    fmt = total_currency_format
                else:
                    fmt = currency_format
                worksheet.write_number(xl_row, j + 1, cell.total, fmt)
        worksheet.write(2, 0, 'Line', section_format)

        if schedule is not None:
            annual = debt_schedule_by_year(schedule)
            annual.to_excel(writer, sheet_name="Debt Schedule", index=False)
            debt_ws = writer.sheets["Debt Schedule"]
            debt_ws.set_column(0, 0, 8)
            debt_ws.set_column(1, 4, 16, currency_format)

    return bio.getvalue()
