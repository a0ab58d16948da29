from __future__ import annotations

import io

import pandas as pd
from sqlalchemy import select

from ..database.orm import Property, Shareholder, db

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class CheckInReportService:
    def rows(self) -> list[dict]:
        result = db.session.execute(
            select(Property, Shareholder)
            .outerjoin(Shareholder, Shareholder.shareholder_id == Property.shareholder_id)
            .order_by(Property.account)
        ).all()

        data = []
        for prop, holder in result:
            data.append(
                {
                    "Account": prop.account,
                    "Shareholder ID": prop.shareholder_id,
                    "Shareholder": holder.name if holder else "",
                    "Owner Name": prop.owner_name or "",
                    "Service Address": prop.service_address or "",
                    "Checked In": "Yes" if prop.checked_in else "No",
                    "Checked In At": (
                        holder.checked_in_at.strftime("%Y-%m-%d %H:%M") if holder and holder.checked_in_at else ""
                    ),
                    "Designee": (holder.designee or "") if holder else "",
                }
            )
        return data

    def export_xlsx(self) -> io.BytesIO:
        df = pd.DataFrame(
            self.rows(),
            columns=[
                "Account",
                "Shareholder ID",
                "Shareholder",
                "Owner Name",
                "Service Address",
                "Checked In",
                "Checked In At",
                "Designee",
            ],
        )

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="CheckIns")

        output.seek(0)
        return output
