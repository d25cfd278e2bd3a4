"""
Use Cases Layer (Business Operations)

Structure
---------
usecases/
├── credentials/    # login, logout, refresh, register, me, password reset
└── admin/          # user listing, send credentials, set password

Usage
-----
    from hrms.application.usecases.credentials import LoginUseCase
    from hrms.application.usecases.admin import ListUsersUseCase
"""
