"""
Sample help text in the layout ``Get-Help -Full`` prints at 500 columns.
"""

GET_FOO_HELP = r"""
NAME
    Get-Foo

SYNOPSIS
    Does the thing.


SYNTAX
    Get-Foo [-Name] <String> [-Force] [<CommonParameters>]


DESCRIPTION
    Gets the foo objects from the bar store.


PARAMETERS
    -Name <String>
        Name of the foo to get.

        Required?                    true
        Position?                    1
        Default value
        Accept pipeline input?       true (ByValue)
        Accept wildcard characters?  false

    -Force [<SwitchParameter>]
        Include hidden foos.

        Required?                    false
        Position?                    named
        Default value                False
        Accept pipeline input?       false
        Accept wildcard characters?  false

    <CommonParameters>
        This cmdlet supports the common parameters: Verbose, Debug, ErrorAction.

INPUTS

OUTPUTS

    -------------------------- EXAMPLE 1 --------------------------

    PS C:\>Get-Foo -Name bar

    Gets the bar foo.




    -------------------------- EXAMPLE 3 --------------------------

    PS C:\>Get-Foo -Name baz -Force




RELATED LINKS
"""

ANGLE_SYNTAX_HELP = """
NAME
    Get-Foo

SYNOPSIS
    Does the thing.

SYNTAX
    Get-Foo <Name>

DESCRIPTION
    Uses angle brackets in its syntax.
"""

NO_SECTIONS_HELP = """
NAME
    Invoke-Bare

SYNOPSIS
    Bare command.
"""


def make_help(name: str, synopsis: str = "Does the thing.") -> str:
    """Build a minimal help document for ``name``."""
    return (
        f"\nNAME\n    {name}\n\n"
        f"SYNOPSIS\n    {synopsis}\n\n"
        f"SYNTAX\n    {name} [<CommonParameters>]\n\n"
        f"DESCRIPTION\n    Long description of {name}.\n"
    )
