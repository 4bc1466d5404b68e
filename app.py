# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py migrate --db assistencia.db
  python app.py clientes add --nome "Maria" --telefone "(11) 99999-9999"
  python app.py vendas nova --item <produto>:2 --pagamento pix
  python app.py rel gerencial --periodo month
  python app.py tui
"""

from assistencia.adapters.cli import main

if __name__ == "__main__":
    main()
