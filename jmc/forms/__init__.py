"""Quote documents.

Key exports:
    render_document()     — Quote PDF as bytes
    generate_quote_pdf()  — Quote PDF written to OUTPUT_DIR
    render_table()        — Quote CSV as text
    write_quote_csv()     — presupuesto_jmc.csv written to OUTPUT_DIR
"""
