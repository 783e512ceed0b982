from django.contrib import admin

from scripture.models import DailyScripture, MonthlyTheme

admin.site.site_header = 'Tea Time with the Word'
admin.site.site_title = 'Tea Time Admin'
admin.site.index_title = 'Verset du jour & thèmes'
admin.empty_value_display = '**Empty**'


@admin.register(MonthlyTheme)
class MonthlyThemeAdmin(admin.ModelAdmin):
    list_display = ('month_key', 'text', 'updated_at')
    search_fields = ('month_key', 'text')
    ordering = ('-month_key',)
    readonly_fields = ('updated_at',)


@admin.register(DailyScripture)
class DailyScriptureAdmin(admin.ModelAdmin):
    # Configuration de l'affichage dans la liste
    list_display = ('date', 'reference', 'expanded_reference', 'created_at')
    search_fields = ('reference', 'expanded_reference')
    ordering = ('-date',)
    date_hierarchy = 'date'

    # Configuration du formulaire d'édition
    fieldsets = (
        (None, {
            'fields': ('date', 'reference', 'versions')
        }),
        ('Contexte élargi', {
            'fields': ('expanded_reference', 'expanded_versions'),
            'classes': ('collapse',)
        }),
        ('Métadonnées', {
            'fields': ('created_at',),
            'classes': ('collapse',)
        })
    )

    # Champs en lecture seule
    readonly_fields = ('created_at',)
