# assistencia/config.py
"""
Configurações globais e valores padrão da assistência técnica.
"""

import os
from dataclasses import dataclass


# Caminho padrão do banco SQLite (pode ser sobrescrito por ASSISTENCIA_DB)
DB_PATH = os.environ.get("ASSISTENCIA_DB") or os.path.join(os.getcwd(), "assistencia.db")

# Chaves de armazenamento (mesmos nomes do armazenamento local original)
STATE_KEY = "techAssistanceData"
COMPANY_SETTINGS_KEY = "companySettings"
USER_SETTINGS_KEY = "userSettings"
SYSTEM_SETTINGS_KEY = "systemSettings"

# Chaves de topo do documento de backup
BACKUP_KEYS = ("customers", "serviceOrders", "products", "sales", "stockMovements")


@dataclass(frozen=True)
class FormLimits:
    """Limites de tamanho dos campos de formulário."""
    product_name: int = 100
    product_category: int = 50
    product_supplier: int = 100
    device: int = 100
    issue: int = 500
    notes: int = 1000
    movement_reason: int = 200


LIMITS = FormLimits()


@dataclass
class CompanySettings:
    """Dados da empresa (cabeçalho de documentos impressos)."""
    name: str = "JPSOLUTECH"
    address: str = ""
    phone: str = ""
    email: str = ""
    cnpj: str = ""
    logo: str = ""


@dataclass
class UserSettings:
    """Preferências do usuário."""
    name: str = "Admin"
    email: str = "admin@techassist.com"
    notifications: bool = True
    email_alerts: bool = True
    sound_effects: bool = False


@dataclass
class SystemSettings:
    """Parâmetros do sistema."""
    auto_backup: bool = True
    low_stock_alert: int = 5
    default_service_warranty: int = 90  # dias
    print_receipts: bool = True
    dark_mode: bool = False


# Quantidade máxima de itens nos rankings de relatório
TOP_N = 10
# Quantidade de itens do ranking exibida no relatório gerencial impresso
TOP_N_IMPRESSO = 5
